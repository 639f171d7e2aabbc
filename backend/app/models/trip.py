"""Trip model — a published travel plan other users can match against."""

import math

from sqlalchemy import Column, String, Float, Boolean, Date, Text, ForeignKey, Index, Integer
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship

from app.models.base import Base, TimestampMixin, UUIDMixin

# Statuses a trip can be discovered in
ACTIVE_TRIP_STATUSES = ("planning", "confirmed")


class Trip(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "trips"

    creator_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(100), nullable=False)
    description = Column(Text)

    # Destination
    destination_city = Column(String(100), nullable=False, index=True)
    destination_country = Column(String(100), nullable=False, index=True)
    destination_region = Column(String(100))

    # Geocoding
    latitude = Column(Float)
    longitude = Column(Float)
    geocode_status = Column(String(20), default="pending")  # pending, success, failed

    # Dates
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    # Travel details
    travel_mode = Column(String(20))  # car, bike, flight, train, bus, mixed
    budget_estimated = Column(Float)
    budget_currency = Column(String(3), default="USD", nullable=False)
    interests = Column(JSONB, server_default="[]", nullable=False, default=list)
    travel_style = Column(String(20))

    # Group settings
    is_open_to_partners = Column(Boolean, default=True, nullable=False)
    max_participants = Column(Integer, default=4, nullable=False)
    current_participants = Column(Integer, default=1, nullable=False)

    privacy = Column(String(20), default="public", nullable=False)  # public, friends-only, invite-only, private
    status = Column(String(20), default="planning", nullable=False)  # planning, confirmed, in-progress, completed, cancelled

    # Relationships
    creator = relationship("User", back_populates="trips")
    swipes = relationship(
        "TripSwipe", foreign_keys="TripSwipe.trip_id", back_populates="trip", cascade="all, delete-orphan"
    )
    pairings = relationship(
        "TripPairing", foreign_keys="TripPairing.trip_id", back_populates="trip", cascade="all, delete-orphan"
    )
    join_requests = relationship("TripJoinRequest", back_populates="trip", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_trip_dates", "start_date", "end_date"),
        Index("idx_trip_discoverable", "privacy", "is_open_to_partners", "status"),
    )

    @property
    def destination_label(self) -> str:
        return ", ".join(part for part in (self.destination_city, self.destination_country) if part)

    @property
    def duration_days(self) -> int:
        if not self.start_date or not self.end_date:
            return 0
        return math.ceil((self.end_date - self.start_date).total_seconds() / 86400)

    @property
    def is_full(self) -> bool:
        return (self.current_participants or 1) >= self.max_participants

    def can_user_join(self, user_id) -> bool:
        """Open to partners, has room, and the user is not the creator."""
        if not self.is_open_to_partners or self.is_full:
            return False
        return str(self.creator_id) != str(user_id)
