"""User model — account credentials plus the travel profile used for matching."""

from sqlalchemy import Column, String, Boolean, DateTime, Float, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from app.models.base import Base, TimestampMixin, UUIDMixin


class User(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    display_name = Column(String(100), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login_at = Column(DateTime(timezone=True))

    # Profile
    bio = Column(Text)
    nationality = Column(String(100))

    # Travel preferences; list-valued fields are JSONB arrays of strings
    interests = Column(JSONB, server_default="[]", nullable=False, default=list)
    travel_style = Column(String(20))  # budget, mid-range, luxury, backpacker
    budget_min = Column(Float)
    budget_max = Column(Float)
    budget_preferred = Column(Float)
    budget_currency = Column(String(3), default="USD", nullable=False)
    languages = Column(JSONB, server_default="[]", nullable=False, default=list)
    preferred_destinations = Column(JSONB, server_default="[]", nullable=False, default=list)
    # [{"start": "2026-06-01", "end": "2026-06-15"}, ...]
    available_dates = Column(JSONB, server_default="[]", nullable=False, default=list)

    # Relationships
    trips = relationship("Trip", back_populates="creator", cascade="all, delete-orphan")
    sent_matches = relationship(
        "Match", foreign_keys="Match.requester_id", back_populates="requester", cascade="all, delete-orphan"
    )
    received_matches = relationship(
        "Match", foreign_keys="Match.recipient_id", back_populates="recipient", cascade="all, delete-orphan"
    )
