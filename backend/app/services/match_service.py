"""Match service — trip discovery, swipes and person-to-person match requests.

ORM rows are converted into the engine's plain dataclasses here; the engine
itself never sees SQLAlchemy objects.
"""

import logging
import math
from datetime import date, datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import get_settings
from app.models.match import Match
from app.models.trip import Trip, ACTIVE_TRIP_STATUSES
from app.models.trip_swipe import TripSwipe, TripPairing
from app.models.user import User
from app.services.compatibility import (
    BudgetRange,
    CompatibilityEngine,
    CompatibilityResult,
    DateRange,
    Destination,
    RankedCandidate,
    TripProposal,
    UserProfile,
    default_engine,
    rank_candidates,
)

logger = logging.getLogger(__name__)
settings = get_settings()


class TripNotFound(Exception):
    pass


class NotTripOwner(Exception):
    pass


class UserNotFound(Exception):
    pass


class InvalidSwipe(Exception):
    pass


class AlreadySwiped(InvalidSwipe):
    pass


class MatchNotFound(Exception):
    pass


class DuplicateMatchRequest(Exception):
    pass


class SelfMatchRequest(Exception):
    pass


class InvalidMatchTransition(Exception):
    pass


# --- ORM -> engine conversion ---

def _as_date(value) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def parse_available_dates(raw: list | None) -> tuple[DateRange, ...]:
    """Stored [{"start": "2026-06-01", "end": "2026-06-15"}, ...] -> DateRange tuple."""
    windows = []
    for item in raw or ():
        if not item or item.get("start") is None or item.get("end") is None:
            continue
        windows.append(DateRange(start=_as_date(item["start"]), end=_as_date(item["end"])))
    return tuple(windows)


def user_to_profile(user: User) -> UserProfile:
    has_budget = any(v is not None for v in (user.budget_min, user.budget_max, user.budget_preferred))
    budget = BudgetRange(
        min=user.budget_min,
        max=user.budget_max,
        preferred=user.budget_preferred,
        currency=user.budget_currency or "USD",
    ) if has_budget else None

    return UserProfile(
        id=user.id,
        interests=frozenset(user.interests or ()),
        travel_style=user.travel_style,
        budget=budget,
        languages=frozenset(user.languages or ()),
        preferred_destinations=frozenset(user.preferred_destinations or ()),
        available_dates=parse_available_dates(user.available_dates),
    )


def trip_to_proposal(trip: Trip) -> TripProposal:
    return TripProposal(
        id=trip.id,
        destination=Destination(
            city=trip.destination_city,
            country=trip.destination_country,
            region=trip.destination_region,
        ),
        start=trip.start_date,
        end=trip.end_date,
        budget=trip.budget_estimated,
        currency=trip.budget_currency or "USD",
        interests=frozenset(trip.interests or ()),
        travel_style=trip.travel_style,
    )


def paginate(items: list, page: int, limit: int) -> tuple[list, dict]:
    """Slice a fully ranked list; page is 1-based."""
    total = len(items)
    start = (page - 1) * limit
    return items[start:start + limit], {
        "current": page,
        "pages": math.ceil(total / limit) if limit else 0,
        "total": total,
    }


def check_transition(match: Match, user_id: UUID, new_status: str, now: datetime) -> None:
    """Recipients accept or reject, requesters cancel, and only while pending."""
    if match.status != "pending":
        raise InvalidMatchTransition(f"Match is already {match.status}")
    if match.expires_at is not None and match.expires_at <= now:
        raise InvalidMatchTransition("Match request has expired")

    is_requester = str(match.requester_id) == str(user_id)
    is_recipient = str(match.recipient_id) == str(user_id)
    if new_status in ("accepted", "rejected") and not is_recipient:
        raise InvalidMatchTransition("Only the recipient can accept or reject a request")
    if new_status == "cancelled" and not is_requester:
        raise InvalidMatchTransition("Only the requester can cancel a request")


# --- Queries ---

async def get_owned_trip(db: AsyncSession, trip_id: UUID, user_id: UUID) -> Trip:
    result = await db.execute(select(Trip).where(Trip.id == trip_id))
    trip = result.scalar_one_or_none()
    if not trip:
        raise TripNotFound("Trip not found")
    if str(trip.creator_id) != str(user_id):
        raise NotTripOwner("Not authorized")
    return trip


async def _candidate_trips(
    db: AsyncSession,
    own_trip: Trip,
    user_id: UUID,
    exclude_ids: list[UUID] | None = None,
) -> list[Trip]:
    """Public, open, active trips created by other users."""
    query = select(Trip).where(
        Trip.id != own_trip.id,
        Trip.creator_id != user_id,
        Trip.is_open_to_partners == True,  # noqa: E712
        Trip.privacy == "public",
        Trip.status.in_(ACTIVE_TRIP_STATUSES),
    )
    if exclude_ids:
        query = query.where(Trip.id.not_in(exclude_ids))
    result = await db.execute(query.order_by(Trip.created_at.asc()))
    return list(result.scalars().all())


async def discover_matches(
    db: AsyncSession,
    user_id: UUID,
    trip_id: UUID,
    min_score: int | None = None,
    page: int = 1,
    limit: int = 10,
    engine: CompatibilityEngine | None = None,
) -> tuple[list[RankedCandidate], dict]:
    """Score every candidate trip against the user's trip, filter, sort, paginate."""
    engine = engine or default_engine()
    if min_score is None:
        min_score = settings.discover_min_score

    own_trip = await get_owned_trip(db, trip_id, user_id)
    own = trip_to_proposal(own_trip)
    candidates = await _candidate_trips(db, own_trip, user_id)

    ranked = rank_candidates(
        lambda trip: engine.score_trips(own, trip_to_proposal(trip)),
        candidates,
        min_score=min_score,
    )
    return paginate(ranked, page, limit)


async def get_recommendations(
    db: AsyncSession,
    user_id: UUID,
    trip_id: UUID,
    limit: int | None = None,
    engine: CompatibilityEngine | None = None,
) -> list[RankedCandidate]:
    """Top candidates the user has not swiped on yet, no score threshold."""
    engine = engine or default_engine()
    if limit is None:
        limit = settings.recommendation_limit

    own_trip = await get_owned_trip(db, trip_id, user_id)
    swiped = await db.execute(select(TripSwipe.target_trip_id).where(TripSwipe.trip_id == own_trip.id))
    swiped_ids = list(swiped.scalars().all())

    own = trip_to_proposal(own_trip)
    candidates = await _candidate_trips(db, own_trip, user_id, exclude_ids=swiped_ids)
    return rank_candidates(
        lambda trip: engine.score_trips(own, trip_to_proposal(trip)),
        candidates,
        limit=limit,
    )


async def record_swipe(
    db: AsyncSession,
    user_id: UUID,
    trip_id: UUID,
    target_trip_id: UUID,
    action: str,
) -> bool:
    """Store a like/pass. Returns True when a like is reciprocated (mutual match)."""
    if trip_id == target_trip_id:
        raise InvalidSwipe("Cannot swipe on your own trip")

    own_trip = await get_owned_trip(db, trip_id, user_id)
    target = await db.execute(select(Trip).where(Trip.id == target_trip_id))
    target_trip = target.scalar_one_or_none()
    if not target_trip:
        raise TripNotFound("Trip not found")

    existing = await db.execute(
        select(TripSwipe).where(TripSwipe.trip_id == own_trip.id, TripSwipe.target_trip_id == target_trip.id)
    )
    if existing.scalar_one_or_none():
        raise AlreadySwiped("Already swiped on this trip")

    db.add(TripSwipe(trip_id=own_trip.id, target_trip_id=target_trip.id, action=action))

    is_match = False
    if action == "like":
        mutual = await db.execute(
            select(TripSwipe).where(
                TripSwipe.trip_id == target_trip.id,
                TripSwipe.target_trip_id == own_trip.id,
                TripSwipe.action == "like",
            )
        )
        if mutual.scalar_one_or_none():
            is_match = True
            db.add(TripPairing(trip_id=own_trip.id, matched_trip_id=target_trip.id))
            db.add(TripPairing(trip_id=target_trip.id, matched_trip_id=own_trip.id))
            logger.info("Mutual trip match between %s and %s", own_trip.id, target_trip.id)

    await db.flush()
    return is_match


async def list_trip_pairings(
    db: AsyncSession,
    user_id: UUID,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[TripPairing], dict]:
    """Mutual matches across all of the user's trips, newest first."""
    owned = (
        select(TripPairing)
        .join(Trip, TripPairing.trip_id == Trip.id)
        .where(Trip.creator_id == user_id)
    )

    count_result = await db.execute(select(func.count()).select_from(owned.subquery()))
    total = count_result.scalar() or 0

    result = await db.execute(
        owned.options(selectinload(TripPairing.trip), selectinload(TripPairing.matched_trip))
        .order_by(TripPairing.matched_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    pairings = list(result.scalars().all())
    return pairings, {"current": page, "pages": math.ceil(total / limit), "total": total}


async def _load_pair(db: AsyncSession, recipient_id: UUID, trip_id: UUID) -> tuple[User, Trip]:
    recipient_result = await db.execute(
        select(User).where(User.id == recipient_id, User.is_active == True)  # noqa: E712
    )
    recipient = recipient_result.scalar_one_or_none()
    if not recipient:
        raise UserNotFound("User not found")

    trip_result = await db.execute(select(Trip).where(Trip.id == trip_id))
    trip = trip_result.scalar_one_or_none()
    if not trip:
        raise TripNotFound("Trip not found")
    return recipient, trip


async def score_pair(
    db: AsyncSession,
    requester: User,
    recipient_id: UUID,
    trip_id: UUID,
    engine: CompatibilityEngine | None = None,
) -> CompatibilityResult:
    """Compatibility preview for a potential match request; nothing is stored."""
    engine = engine or default_engine()
    recipient, trip = await _load_pair(db, recipient_id, trip_id)
    return engine.score(user_to_profile(requester), user_to_profile(recipient), trip_to_proposal(trip))


async def create_match_request(
    db: AsyncSession,
    requester: User,
    recipient_id: UUID,
    trip_id: UUID,
    message: str | None = None,
    now: datetime | None = None,
    engine: CompatibilityEngine | None = None,
) -> Match:
    """Score the pair and persist a pending match request."""
    engine = engine or default_engine()
    now = now or datetime.now(timezone.utc)

    if str(recipient_id) == str(requester.id):
        raise SelfMatchRequest("Cannot send a match request to yourself")

    recipient, trip = await _load_pair(db, recipient_id, trip_id)

    existing = await db.execute(
        select(Match.id).where(
            Match.requester_id == requester.id,
            Match.recipient_id == recipient.id,
            Match.trip_id == trip.id,
        )
    )
    if existing.scalar_one_or_none():
        raise DuplicateMatchRequest("Match request already sent")

    result = engine.score(user_to_profile(requester), user_to_profile(recipient), trip_to_proposal(trip))
    match = Match(
        requester_id=requester.id,
        recipient_id=recipient.id,
        trip_id=trip.id,
        status="pending",
        compatibility_score=result.score,
        match_factors=dict(result.factors),
        message=message,
        expires_at=now + timedelta(days=settings.match_request_ttl_days),
        is_active=True,
    )
    db.add(match)
    await db.flush()

    logger.info(
        "Match request %s -> %s for trip %s (score %d)",
        requester.id, recipient.id, trip.id, result.score,
    )
    return match


async def list_match_requests(
    db: AsyncSession,
    user_id: UUID,
    role: str = "received",
    status: str | None = None,
) -> list[Match]:
    if role == "sent":
        query = select(Match).where(Match.requester_id == user_id)
    elif role == "received":
        query = select(Match).where(Match.recipient_id == user_id)
    else:
        query = select(Match).where(or_(Match.requester_id == user_id, Match.recipient_id == user_id))

    if status:
        query = query.where(Match.status == status)

    result = await db.execute(query.order_by(Match.created_at.desc()))
    return list(result.scalars().all())


async def update_match_status(
    db: AsyncSession,
    user_id: UUID,
    match_id: UUID,
    new_status: str,
    now: datetime | None = None,
) -> Match:
    now = now or datetime.now(timezone.utc)

    result = await db.execute(
        select(Match).where(
            Match.id == match_id,
            or_(Match.requester_id == user_id, Match.recipient_id == user_id),
        )
    )
    match = result.scalar_one_or_none()
    if not match:
        raise MatchNotFound("Match not found")

    check_transition(match, user_id, new_status, now)
    match.status = new_status
    if new_status != "accepted":
        match.is_active = False
    await db.flush()

    logger.info("Match %s %s by user %s", match.id, new_status, user_id)
    return match
