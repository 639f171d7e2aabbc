"""Trip API endpoints."""

import logging
from datetime import date
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import get_db
from app.models.trip import Trip
from app.models.user import User
from app.schemas.trip import (
    JoinRequestCreate,
    JoinRequestRead,
    JoinRequestUpdate,
    TripCreate,
    TripRead,
    TripSummary,
    TripUpdate,
)
from app.services import trip_service
from app.services.match_service import NotTripOwner, TripNotFound, get_owned_trip
from app.services.trip_service import (
    DuplicateJoinRequest,
    JoinRequestAlreadyHandled,
    JoinRequestNotFound,
    TripNotJoinable,
)
from app.dependencies.auth import require_user_api

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["trips"])

NON_NULLABLE_FIELDS = (
    "title", "start_date", "end_date", "interests", "is_open_to_partners",
    "max_participants", "privacy", "status",
)

# Join request exception -> HTTP status
JOIN_ERROR_STATUS = {
    TripNotFound: 404,
    JoinRequestNotFound: 404,
    NotTripOwner: 403,
    TripNotJoinable: 400,
    DuplicateJoinRequest: 409,
    JoinRequestAlreadyHandled: 409,
}


async def _owned_or_http(db: AsyncSession, trip_id: UUID, user: User) -> Trip:
    try:
        return await get_owned_trip(db, trip_id, user.id)
    except TripNotFound:
        raise HTTPException(status_code=404, detail="Trip not found")
    except NotTripOwner:
        raise HTTPException(status_code=403, detail="Not authorized")


@router.post("", response_model=TripRead, status_code=201)
async def create_trip(
    data: TripCreate,
    user: User = Depends(require_user_api),
    db: AsyncSession = Depends(get_db),
):
    """Create a trip. Geocoding happens later in the background."""
    trip = Trip(
        **data.model_dump(),
        creator_id=user.id,
        status="planning",
        current_participants=1,
        geocode_status="pending",
    )
    db.add(trip)
    await db.flush()
    await db.refresh(trip)

    logger.info("User %s created trip %s to %s", user.id, trip.id, trip.destination_label)
    return trip


@router.get("", response_model=list[TripSummary])
async def list_trips(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user_api),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    destination: str | None = Query(None, min_length=2, description="Search in city or country"),
    start_after: date | None = Query(None, description="Trips starting on or after this date"),
    end_before: date | None = Query(None, description="Trips ending on or before this date"),
    interest: str | None = Query(None, description="Trips tagged with this interest"),
    travel_style: str | None = Query(None),
):
    """List public trips with filters."""
    query = select(Trip).where(Trip.privacy == "public")

    if destination:
        pattern = f"%{destination}%"
        query = query.where(Trip.destination_city.ilike(pattern) | Trip.destination_country.ilike(pattern))
    if start_after:
        query = query.where(Trip.start_date >= start_after)
    if end_before:
        query = query.where(Trip.end_date <= end_before)
    if interest:
        query = query.where(Trip.interests.contains([interest]))
    if travel_style:
        query = query.where(Trip.travel_style == travel_style)

    query = query.order_by(Trip.start_date.asc()).offset(skip).limit(limit)
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/my", response_model=list[TripRead])
async def my_trips(
    user: User = Depends(require_user_api),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Trip).where(Trip.creator_id == user.id).order_by(Trip.start_date.desc())
    )
    return result.scalars().all()


@router.get("/{trip_id}", response_model=TripRead)
async def get_trip(
    trip_id: UUID,
    user: User = Depends(require_user_api),
    db: AsyncSession = Depends(get_db),
):
    """Get a trip. Non-public trips are only visible to their creator."""
    result = await db.execute(select(Trip).where(Trip.id == trip_id))
    trip = result.scalar_one_or_none()
    if not trip or (trip.privacy != "public" and str(trip.creator_id) != str(user.id)):
        raise HTTPException(status_code=404, detail="Trip not found")
    return trip


@router.put("/{trip_id}", response_model=TripRead)
async def update_trip(
    trip_id: UUID,
    data: TripUpdate,
    user: User = Depends(require_user_api),
    db: AsyncSession = Depends(get_db),
):
    trip = await _owned_or_http(db, trip_id, user)

    updates = data.model_dump(exclude_unset=True)

    # Explicit nulls on non-nullable columns are ignored
    for field in NON_NULLABLE_FIELDS:
        if field in updates and updates[field] is None:
            del updates[field]

    start = updates.get("start_date", trip.start_date)
    end = updates.get("end_date", trip.end_date)
    if end <= start:
        raise HTTPException(status_code=422, detail="End date must be after start date")
    if updates.get("max_participants", trip.max_participants) < (trip.current_participants or 1):
        raise HTTPException(status_code=422, detail="max_participants is below the current participant count")

    for field, value in updates.items():
        setattr(trip, field, value)
    await db.flush()
    await db.refresh(trip)
    return trip


@router.delete("/{trip_id}", status_code=204)
async def delete_trip(
    trip_id: UUID,
    user: User = Depends(require_user_api),
    db: AsyncSession = Depends(get_db),
):
    trip = await _owned_or_http(db, trip_id, user)
    await db.delete(trip)
    await db.flush()
    logger.info("User %s deleted trip %s", user.id, trip_id)
    return Response(status_code=204)


# --- Join requests ---

def _join_error(exc: Exception) -> HTTPException:
    for exc_type, status_code in JOIN_ERROR_STATUS.items():
        if isinstance(exc, exc_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    raise exc


@router.post("/{trip_id}/join", response_model=JoinRequestRead, status_code=201)
async def join_trip(
    trip_id: UUID,
    data: JoinRequestCreate,
    user: User = Depends(require_user_api),
    db: AsyncSession = Depends(get_db),
):
    """Ask the trip's creator for a seat."""
    try:
        return await trip_service.request_to_join(db, user.id, trip_id, message=data.message)
    except (TripNotFound, TripNotJoinable, DuplicateJoinRequest) as e:
        raise _join_error(e)


@router.get("/{trip_id}/join-requests", response_model=list[JoinRequestRead])
async def list_join_requests(
    trip_id: UUID,
    status: Literal["pending", "accepted", "rejected"] | None = None,
    user: User = Depends(require_user_api),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await trip_service.list_join_requests(db, user.id, trip_id, status=status)
    except (TripNotFound, NotTripOwner) as e:
        raise _join_error(e)


@router.put("/{trip_id}/join-requests/{request_id}", response_model=JoinRequestRead)
async def respond_to_join_request(
    trip_id: UUID,
    request_id: UUID,
    data: JoinRequestUpdate,
    user: User = Depends(require_user_api),
    db: AsyncSession = Depends(get_db),
):
    """Accept or reject a join request. Only the trip creator can do this."""
    try:
        return await trip_service.respond_to_join_request(db, user.id, trip_id, request_id, data.action)
    except (TripNotFound, NotTripOwner, JoinRequestNotFound, JoinRequestAlreadyHandled, TripNotJoinable) as e:
        raise _join_error(e)
