"""Matching API endpoints — discovery, swipes, mutual matches and match requests."""

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import get_db
from app.models.user import User
from app.schemas.match import (
    CompatibilityRead,
    DiscoverResponse,
    MatchRead,
    MatchRequestCreate,
    MatchStatusUpdate,
    MyMatchesResponse,
    SwipeRequest,
    SwipeResponse,
    TripCandidate,
    TripPairingRead,
)
from app.schemas.trip import TripSummary
from app.services import match_service
from app.services.match_service import (
    DuplicateMatchRequest,
    InvalidMatchTransition,
    InvalidSwipe,
    MatchNotFound,
    NotTripOwner,
    SelfMatchRequest,
    TripNotFound,
    UserNotFound,
)
from app.dependencies.auth import require_user_api

router = APIRouter(prefix="/matches", tags=["matches"])

# Service exception -> HTTP status
ERROR_STATUS = {
    TripNotFound: 404,
    UserNotFound: 404,
    MatchNotFound: 404,
    NotTripOwner: 403,
    InvalidSwipe: 400,
    SelfMatchRequest: 400,
    DuplicateMatchRequest: 409,
    InvalidMatchTransition: 409,
}


def _http_error(exc: Exception) -> HTTPException:
    for exc_type, status_code in ERROR_STATUS.items():
        if isinstance(exc, exc_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    raise exc


def _candidate(ranked) -> TripCandidate:
    return TripCandidate(
        trip=TripSummary.model_validate(ranked.candidate),
        compatibility=CompatibilityRead(**ranked.result.to_dict()),
    )


@router.get("/discover", response_model=DiscoverResponse)
async def discover(
    trip_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    min_score: int | None = Query(None, ge=0, le=100),
    user: User = Depends(require_user_api),
    db: AsyncSession = Depends(get_db),
):
    """Trips compatible with one of the user's trips, best first."""
    try:
        ranked, pagination = await match_service.discover_matches(
            db, user.id, trip_id, min_score=min_score, page=page, limit=limit
        )
    except (TripNotFound, NotTripOwner) as e:
        raise _http_error(e)

    return DiscoverResponse(matches=[_candidate(r) for r in ranked], pagination=pagination)


@router.get("/recommendations/{trip_id}", response_model=list[TripCandidate])
async def recommendations(
    trip_id: UUID,
    limit: int | None = Query(None, ge=1, le=50),
    user: User = Depends(require_user_api),
    db: AsyncSession = Depends(get_db),
):
    try:
        ranked = await match_service.get_recommendations(db, user.id, trip_id, limit=limit)
    except (TripNotFound, NotTripOwner) as e:
        raise _http_error(e)
    return [_candidate(r) for r in ranked]


@router.post("/swipe", response_model=SwipeResponse)
async def swipe(
    data: SwipeRequest,
    user: User = Depends(require_user_api),
    db: AsyncSession = Depends(get_db),
):
    try:
        is_match = await match_service.record_swipe(db, user.id, data.trip_id, data.target_trip_id, data.action)
    except (TripNotFound, NotTripOwner, InvalidSwipe) as e:
        raise _http_error(e)

    if is_match:
        message = "It's a match!"
    elif data.action == "like":
        message = "Trip liked"
    else:
        message = "Trip passed"
    return SwipeResponse(action=data.action, is_match=is_match, message=message)


@router.get("/my-matches", response_model=MyMatchesResponse)
async def my_matches(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    user: User = Depends(require_user_api),
    db: AsyncSession = Depends(get_db),
):
    pairings, pagination = await match_service.list_trip_pairings(db, user.id, page=page, limit=limit)
    return MyMatchesResponse(
        matches=[
            TripPairingRead(
                user_trip=TripSummary.model_validate(p.trip),
                matched_trip=TripSummary.model_validate(p.matched_trip),
                matched_at=p.matched_at,
            )
            for p in pairings
        ],
        pagination=pagination,
    )


@router.get("/score", response_model=CompatibilityRead)
async def score_preview(
    recipient_id: UUID,
    trip_id: UUID,
    user: User = Depends(require_user_api),
    db: AsyncSession = Depends(get_db),
):
    """Compatibility with another user for a trip, without sending a request."""
    try:
        result = await match_service.score_pair(db, user, recipient_id, trip_id)
    except (UserNotFound, TripNotFound) as e:
        raise _http_error(e)
    return CompatibilityRead(**result.to_dict())


@router.post("/requests", response_model=MatchRead, status_code=201)
async def create_request(
    data: MatchRequestCreate,
    user: User = Depends(require_user_api),
    db: AsyncSession = Depends(get_db),
):
    try:
        match = await match_service.create_match_request(
            db, user, data.recipient_id, data.trip_id, message=data.message
        )
    except (SelfMatchRequest, UserNotFound, TripNotFound, DuplicateMatchRequest) as e:
        raise _http_error(e)
    return match


@router.get("/requests", response_model=list[MatchRead])
async def list_requests(
    role: Literal["sent", "received", "all"] = Query("received"),
    status: Literal["pending", "accepted", "rejected", "cancelled"] | None = Query(None),
    user: User = Depends(require_user_api),
    db: AsyncSession = Depends(get_db),
):
    return await match_service.list_match_requests(db, user.id, role=role, status=status)


@router.put("/requests/{match_id}", response_model=MatchRead)
async def update_request(
    match_id: UUID,
    data: MatchStatusUpdate,
    user: User = Depends(require_user_api),
    db: AsyncSession = Depends(get_db),
):
    """Accept or reject (recipient) or cancel (requester) a pending request."""
    try:
        return await match_service.update_match_status(db, user.id, match_id, data.status)
    except (MatchNotFound, InvalidMatchTransition) as e:
        raise _http_error(e)
