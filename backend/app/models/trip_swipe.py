"""Trip swipe models — like/pass decisions between trips and the mutual pairings they create."""

from sqlalchemy import Column, String, DateTime, ForeignKey, Index, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.models.base import Base, UUIDMixin


class TripSwipe(UUIDMixin, Base):
    __tablename__ = "trip_swipes"

    trip_id = Column(UUID(as_uuid=True), ForeignKey("trips.id", ondelete="CASCADE"), nullable=False)
    target_trip_id = Column(UUID(as_uuid=True), ForeignKey("trips.id", ondelete="CASCADE"), nullable=False)
    action = Column(String(10), nullable=False)  # like, pass
    swiped_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    trip = relationship("Trip", foreign_keys=[trip_id], back_populates="swipes")
    target_trip = relationship("Trip", foreign_keys=[target_trip_id])

    __table_args__ = (
        UniqueConstraint("trip_id", "target_trip_id", name="uq_trip_swipes_trip_target"),
        Index("idx_swipes_target_action", "target_trip_id", "action"),
    )


class TripPairing(UUIDMixin, Base):
    __tablename__ = "trip_pairings"

    trip_id = Column(UUID(as_uuid=True), ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    matched_trip_id = Column(UUID(as_uuid=True), ForeignKey("trips.id", ondelete="CASCADE"), nullable=False)
    matched_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    trip = relationship("Trip", foreign_keys=[trip_id], back_populates="pairings")
    matched_trip = relationship("Trip", foreign_keys=[matched_trip_id])

    __table_args__ = (
        UniqueConstraint("trip_id", "matched_trip_id", name="uq_trip_pairings_trip_matched"),
    )
