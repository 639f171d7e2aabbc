"""Match model — a person-to-person request to travel together on a trip."""

from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship

from app.models.base import Base, TimestampMixin, UUIDMixin

MATCH_STATUSES = ("pending", "accepted", "rejected", "cancelled")


class Match(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "matches"

    requester_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    recipient_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    trip_id = Column(UUID(as_uuid=True), ForeignKey("trips.id", ondelete="CASCADE"), nullable=False)

    status = Column(String(20), default="pending", nullable=False)
    compatibility_score = Column(Integer, nullable=False)
    # Unweighted factor breakdown, {"destination_match": 40.0, ...}
    match_factors = Column(JSONB, server_default="{}", nullable=False, default=dict)
    message = Column(String(500))

    expires_at = Column(DateTime(timezone=True), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    requester = relationship("User", foreign_keys=[requester_id], back_populates="sent_matches")
    recipient = relationship("User", foreign_keys=[recipient_id], back_populates="received_matches")
    trip = relationship("Trip")

    __table_args__ = (
        UniqueConstraint("requester_id", "recipient_id", "trip_id", name="uq_matches_requester_recipient_trip"),
        Index("idx_matches_requester_status", "requester_id", "status"),
        Index("idx_matches_recipient_status", "recipient_id", "status"),
        Index("idx_matches_trip_status", "trip_id", "status"),
        Index("idx_matches_expires", "status", "expires_at"),
    )
