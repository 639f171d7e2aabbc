"""Pydantic schemas for suggestion, safety and budget endpoints."""

from uuid import UUID

from pydantic import BaseModel, Field


class TripSuggestion(BaseModel):
    type: str
    title: str
    destinations: list[str]
    interests: list[str]
    confidence: float


class SafetyScoreRead(BaseModel):
    trip_id: UUID
    country: str
    safety_score: int = Field(..., ge=0, le=100)


class BudgetEstimateRequest(BaseModel):
    country: str
    duration_days: int = Field(..., ge=1, le=365)
    travel_style: str | None = None
    activities: list[str] = []


class BudgetBreakdown(BaseModel):
    accommodation: int
    food: int
    transport: int
    activities: int


class BudgetEstimateRead(BaseModel):
    total: int
    daily: int
    breakdown: BudgetBreakdown
