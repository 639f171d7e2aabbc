"""Pydantic schemas for matching — compatibility results, swipes, match requests."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.trip import TripSummary


class CompatibilityRead(BaseModel):
    """Score plus the unweighted per-factor breakdown."""

    score: int = Field(..., ge=0, le=100)
    factors: dict[str, float]


class TripCandidate(BaseModel):
    trip: TripSummary
    compatibility: CompatibilityRead


class Pagination(BaseModel):
    current: int
    pages: int
    total: int


class DiscoverResponse(BaseModel):
    matches: list[TripCandidate]
    pagination: Pagination


class SwipeRequest(BaseModel):
    trip_id: UUID
    target_trip_id: UUID
    action: Literal["like", "pass"]


class SwipeResponse(BaseModel):
    action: str
    is_match: bool
    message: str


class TripPairingRead(BaseModel):
    user_trip: TripSummary
    matched_trip: TripSummary
    matched_at: datetime


class MyMatchesResponse(BaseModel):
    matches: list[TripPairingRead]
    pagination: Pagination


class MatchRequestCreate(BaseModel):
    recipient_id: UUID
    trip_id: UUID
    message: str | None = Field(None, max_length=500)


class MatchStatusUpdate(BaseModel):
    status: Literal["accepted", "rejected", "cancelled"]


class MatchRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    requester_id: UUID
    recipient_id: UUID
    trip_id: UUID
    status: str
    compatibility_score: int
    match_factors: dict[str, float]
    message: str | None = None
    expires_at: datetime
    is_active: bool
    created_at: datetime | None = None
