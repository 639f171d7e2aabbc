"""Pydantic schemas for Trip model."""

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

TravelMode = Literal["car", "bike", "flight", "train", "bus", "mixed"]
Privacy = Literal["public", "friends-only", "invite-only", "private"]
TripStatus = Literal["planning", "confirmed", "in-progress", "completed", "cancelled"]
TravelStyle = Literal[
    "budget", "mid-range", "luxury", "backpacker",
    "backpacking", "midrange", "mid_range", "mid range",
]


class TripBase(BaseModel):
    """Base fields for a trip."""

    title: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=1000)
    destination_city: str = Field(..., min_length=1, max_length=100)
    destination_country: str = Field(..., min_length=1, max_length=100)
    destination_region: str | None = None
    start_date: date
    end_date: date
    travel_mode: TravelMode | None = None
    budget_estimated: float | None = Field(None, ge=0)
    budget_currency: str = Field("USD", min_length=3, max_length=3)
    interests: list[str] = []
    travel_style: TravelStyle | None = None
    is_open_to_partners: bool = True
    max_participants: int = Field(4, ge=1, le=20)
    privacy: Privacy = "public"


class TripCreate(TripBase):
    @model_validator(mode="after")
    def check_dates(self) -> "TripCreate":
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class TripUpdate(BaseModel):
    """Partial update — only fields that are sent are changed."""

    title: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=1000)
    start_date: date | None = None
    end_date: date | None = None
    travel_mode: TravelMode | None = None
    budget_estimated: float | None = Field(None, ge=0)
    interests: list[str] | None = None
    travel_style: TravelStyle | None = None
    is_open_to_partners: bool | None = None
    max_participants: int | None = Field(None, ge=1, le=20)
    privacy: Privacy | None = None
    status: TripStatus | None = None


class TripRead(TripBase):
    """Full trip output."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    creator_id: UUID
    status: str
    travel_style: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    geocode_status: str | None = None
    current_participants: int
    duration_days: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TripSummary(BaseModel):
    """Minimal trip info for list views and match cards."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    creator_id: UUID
    title: str
    destination_city: str
    destination_country: str
    start_date: date
    end_date: date
    budget_estimated: float | None = None
    interests: list[str] = []
    travel_style: str | None = None


class JoinRequestCreate(BaseModel):
    message: str | None = Field(None, max_length=500)


class JoinRequestUpdate(BaseModel):
    action: Literal["accept", "reject"]


class JoinRequestRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    trip_id: UUID
    user_id: UUID
    status: str
    message: str | None = None
    responded_at: datetime | None = None
    created_at: datetime | None = None
