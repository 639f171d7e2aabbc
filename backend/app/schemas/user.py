"""Pydantic schemas for User accounts and travel profiles."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.schemas.trip import TravelStyle


class AvailabilityWindow(BaseModel):
    """A date range during which the user could travel."""

    start: date
    end: date

    @model_validator(mode="after")
    def check_order(self) -> "AvailabilityWindow":
        if self.start > self.end:
            raise ValueError("Availability window must not end before it starts")
        return self


class UserRegister(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    display_name: str = Field(..., min_length=1, max_length=100)
    password: str


class UserLogin(BaseModel):
    email: str
    password: str


class UserRead(BaseModel):
    """Account info returned by auth endpoints."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    display_name: str
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime | None = None


class TravelProfileBase(BaseModel):
    """Fields feeding the compatibility engine."""

    bio: str | None = Field(None, max_length=500)
    nationality: str | None = None
    interests: list[str] = []
    travel_style: TravelStyle | None = None
    budget_min: float | None = Field(None, ge=0)
    budget_max: float | None = Field(None, ge=0)
    budget_preferred: float | None = Field(None, ge=0)
    budget_currency: str = Field("USD", min_length=3, max_length=3)
    languages: list[str] = []
    preferred_destinations: list[str] = []
    available_dates: list[AvailabilityWindow] = []


class TravelProfileRead(TravelProfileBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    display_name: str
    travel_style: str | None = None


class TravelProfileUpdate(BaseModel):
    """Partial update — only fields that are sent are changed."""

    bio: str | None = Field(None, max_length=500)
    nationality: str | None = None
    interests: list[str] | None = None
    travel_style: TravelStyle | None = None
    budget_min: float | None = Field(None, ge=0)
    budget_max: float | None = Field(None, ge=0)
    budget_preferred: float | None = Field(None, ge=0)
    budget_currency: str | None = Field(None, min_length=3, max_length=3)
    languages: list[str] | None = None
    preferred_destinations: list[str] | None = None
    available_dates: list[AvailabilityWindow] | None = None

    @model_validator(mode="after")
    def check_budget(self) -> "TravelProfileUpdate":
        if self.budget_min is not None and self.budget_max is not None and self.budget_min > self.budget_max:
            raise ValueError("budget_min must not exceed budget_max")
        return self
