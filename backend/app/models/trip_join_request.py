"""Trip join request model — a user asking the creator for a seat on a trip."""

from sqlalchemy import Column, String, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.models.base import Base, TimestampMixin, UUIDMixin

JOIN_REQUEST_STATUSES = ("pending", "accepted", "rejected")


class TripJoinRequest(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "trip_join_requests"

    trip_id = Column(UUID(as_uuid=True), ForeignKey("trips.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    status = Column(String(20), default="pending", nullable=False)  # pending, accepted, rejected
    message = Column(String(500))
    responded_at = Column(DateTime(timezone=True))

    # Relationships
    trip = relationship("Trip", back_populates="join_requests")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("trip_id", "user_id", name="uq_trip_join_requests_trip_user"),
        Index("idx_join_requests_trip_status", "trip_id", "status"),
    )
