"""Trip service — join requests and the participant count they drive."""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.trip import Trip
from app.models.trip_join_request import TripJoinRequest
from app.services.match_service import TripNotFound, get_owned_trip

logger = logging.getLogger(__name__)


class TripNotJoinable(Exception):
    """Trip is closed to partners, full, or created by the requesting user."""


class DuplicateJoinRequest(Exception):
    pass


class JoinRequestNotFound(Exception):
    pass


class JoinRequestAlreadyHandled(Exception):
    pass


async def request_to_join(
    db: AsyncSession,
    user_id: UUID,
    trip_id: UUID,
    message: str | None = None,
) -> TripJoinRequest:
    result = await db.execute(select(Trip).where(Trip.id == trip_id))
    trip = result.scalar_one_or_none()
    if not trip or trip.privacy != "public":
        raise TripNotFound("Trip not found")

    if str(trip.creator_id) == str(user_id):
        raise TripNotJoinable("You cannot join your own trip")
    if not trip.can_user_join(user_id):
        if trip.is_full:
            raise TripNotJoinable("This trip is full")
        raise TripNotJoinable("This trip is not open to partners")

    existing = await db.execute(
        select(TripJoinRequest.id).where(TripJoinRequest.trip_id == trip.id, TripJoinRequest.user_id == user_id)
    )
    if existing.scalar_one_or_none():
        raise DuplicateJoinRequest("You already asked to join this trip")

    join_request = TripJoinRequest(trip_id=trip.id, user_id=user_id, status="pending", message=message)
    db.add(join_request)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise DuplicateJoinRequest("You already asked to join this trip")

    logger.info("User %s asked to join trip %s", user_id, trip.id)
    return join_request


async def list_join_requests(
    db: AsyncSession,
    user_id: UUID,
    trip_id: UUID,
    status: str | None = None,
) -> list[TripJoinRequest]:
    """Requests on one of the user's trips, oldest first."""
    trip = await get_owned_trip(db, trip_id, user_id)

    query = select(TripJoinRequest).where(TripJoinRequest.trip_id == trip.id)
    if status:
        query = query.where(TripJoinRequest.status == status)

    result = await db.execute(query.order_by(TripJoinRequest.created_at))
    return list(result.scalars().all())


async def respond_to_join_request(
    db: AsyncSession,
    user_id: UUID,
    trip_id: UUID,
    request_id: UUID,
    action: str,
    now: datetime | None = None,
) -> TripJoinRequest:
    """Accept or reject a pending request. Accepting takes one seat on the trip."""
    now = now or datetime.now(timezone.utc)
    trip = await get_owned_trip(db, trip_id, user_id)

    result = await db.execute(
        select(TripJoinRequest).where(TripJoinRequest.id == request_id, TripJoinRequest.trip_id == trip.id)
    )
    join_request = result.scalar_one_or_none()
    if not join_request:
        raise JoinRequestNotFound("Join request not found")
    if join_request.status != "pending":
        raise JoinRequestAlreadyHandled(f"Join request already {join_request.status}")

    if action == "accept":
        if trip.is_full:
            raise TripNotJoinable("This trip is full")
        join_request.status = "accepted"
        trip.current_participants = (trip.current_participants or 1) + 1
    else:
        join_request.status = "rejected"
    join_request.responded_at = now
    await db.flush()

    logger.info(
        "Join request %s on trip %s %s (%d/%d participants)",
        join_request.id, trip.id, join_request.status, trip.current_participants, trip.max_participants,
    )
    return join_request
