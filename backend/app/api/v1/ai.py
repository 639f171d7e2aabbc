"""Suggestion, safety and budget estimate endpoints."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import get_db
from app.models.trip import Trip
from app.models.user import User
from app.schemas.ai import BudgetEstimateRead, BudgetEstimateRequest, SafetyScoreRead, TripSuggestion
from app.services.suggestion_service import (
    calculate_safety_score,
    estimate_trip_budget,
    generate_trip_suggestions,
)
from app.dependencies.auth import require_user_api

router = APIRouter(prefix="/ai", tags=["ai"])


@router.get("/suggestions", response_model=list[TripSuggestion])
async def suggestions(
    history: int = Query(10, ge=1, le=50, description="How many recent trips to learn from"),
    user: User = Depends(require_user_api),
    db: AsyncSession = Depends(get_db),
):
    """Trip ideas based on the user's recent trips and profile interests."""
    result = await db.execute(
        select(Trip.destination_city, Trip.interests)
        .where(Trip.creator_id == user.id)
        .order_by(Trip.created_at.desc())
        .limit(history)
    )
    past_trips = [(city, interests) for city, interests in result.all()]
    return generate_trip_suggestions(past_trips, user.interests or [], date.today())


@router.get("/trips/{trip_id}/safety", response_model=SafetyScoreRead)
async def trip_safety(
    trip_id: UUID,
    user: User = Depends(require_user_api),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(Trip).where(Trip.id == trip_id))
    trip = result.scalar_one_or_none()
    if not trip or (trip.privacy != "public" and str(trip.creator_id) != str(user.id)):
        raise HTTPException(status_code=404, detail="Trip not found")

    return SafetyScoreRead(
        trip_id=trip.id,
        country=trip.destination_country,
        safety_score=calculate_safety_score(trip.destination_country, trip.start_date),
    )


@router.post("/budget-estimate", response_model=BudgetEstimateRead)
async def budget_estimate(
    data: BudgetEstimateRequest,
    user: User = Depends(require_user_api),
):
    return estimate_trip_budget(data.country, data.duration_days, data.travel_style, data.activities)
