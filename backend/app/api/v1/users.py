"""User profile endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import get_db
from app.models.user import User
from app.schemas.user import TravelProfileRead, TravelProfileUpdate
from app.dependencies.auth import require_user_api

router = APIRouter(prefix="/users", tags=["users"])

NON_NULLABLE_FIELDS = ("interests", "languages", "preferred_destinations", "available_dates", "budget_currency")


@router.get("/profile", response_model=TravelProfileRead)
async def get_profile(user: User = Depends(require_user_api)):
    return user


@router.put("/profile", response_model=TravelProfileRead)
async def update_profile(
    data: TravelProfileUpdate,
    user: User = Depends(require_user_api),
    db: AsyncSession = Depends(get_db),
):
    """Update only the fields that were sent."""
    updates = data.model_dump(exclude_unset=True, mode="json")

    # Explicit nulls on non-nullable columns are ignored
    for field in NON_NULLABLE_FIELDS:
        if field in updates and updates[field] is None:
            del updates[field]

    budget_min = updates.get("budget_min", user.budget_min)
    budget_max = updates.get("budget_max", user.budget_max)
    if budget_min is not None and budget_max is not None and budget_min > budget_max:
        raise HTTPException(status_code=422, detail="budget_min must not exceed budget_max")

    for field, value in updates.items():
        setattr(user, field, value)
    await db.flush()
    return user
