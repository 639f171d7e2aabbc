"""Initial schema — users, trips, matches, trip_swipes, trip_pairings.

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # Users
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
        sa.Column("bio", sa.Text),
        sa.Column("nationality", sa.String(100)),
        sa.Column("interests", postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("travel_style", sa.String(20)),
        sa.Column("budget_min", sa.Float),
        sa.Column("budget_max", sa.Float),
        sa.Column("budget_preferred", sa.Float),
        sa.Column("budget_currency", sa.String(3), nullable=False, server_default="USD"),
        sa.Column("languages", postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("preferred_destinations", postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("available_dates", postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        *_timestamps(),
    )

    # Trips
    op.create_table(
        "trips",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("creator_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("destination_city", sa.String(100), nullable=False, index=True),
        sa.Column("destination_country", sa.String(100), nullable=False, index=True),
        sa.Column("destination_region", sa.String(100)),
        sa.Column("latitude", sa.Float),
        sa.Column("longitude", sa.Float),
        sa.Column("geocode_status", sa.String(20), server_default="pending"),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column("travel_mode", sa.String(20)),
        sa.Column("budget_estimated", sa.Float),
        sa.Column("budget_currency", sa.String(3), nullable=False, server_default="USD"),
        sa.Column("interests", postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("travel_style", sa.String(20)),
        sa.Column("is_open_to_partners", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("max_participants", sa.Integer, nullable=False, server_default=sa.text("4")),
        sa.Column("current_participants", sa.Integer, nullable=False, server_default=sa.text("1")),
        sa.Column("privacy", sa.String(20), nullable=False, server_default="public"),
        sa.Column("status", sa.String(20), nullable=False, server_default="planning"),
        *_timestamps(),
    )
    op.create_index("idx_trip_dates", "trips", ["start_date", "end_date"])
    op.create_index("idx_trip_discoverable", "trips", ["privacy", "is_open_to_partners", "status"])

    # Match requests
    op.create_table(
        "matches",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("requester_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("recipient_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("trip_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("compatibility_score", sa.Integer, nullable=False),
        sa.Column("match_factors", postgresql.JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("message", sa.String(500)),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.UniqueConstraint("requester_id", "recipient_id", "trip_id", name="uq_matches_requester_recipient_trip"),
        sa.CheckConstraint("compatibility_score BETWEEN 0 AND 100", name="ck_matches_score_range"),
    )
    op.create_index("idx_matches_requester_status", "matches", ["requester_id", "status"])
    op.create_index("idx_matches_recipient_status", "matches", ["recipient_id", "status"])
    op.create_index("idx_matches_trip_status", "matches", ["trip_id", "status"])
    op.create_index("idx_matches_expires", "matches", ["status", "expires_at"])

    # Swipes
    op.create_table(
        "trip_swipes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("trip_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False),
        sa.Column("target_trip_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False),
        sa.Column("action", sa.String(10), nullable=False),
        sa.Column("swiped_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("trip_id", "target_trip_id", name="uq_trip_swipes_trip_target"),
    )
    op.create_index("idx_swipes_target_action", "trip_swipes", ["target_trip_id", "action"])

    # Mutual matches, one row per direction
    op.create_table(
        "trip_pairings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("trip_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("matched_trip_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False),
        sa.Column("matched_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("trip_id", "matched_trip_id", name="uq_trip_pairings_trip_matched"),
    )


def downgrade() -> None:
    op.drop_table("trip_pairings")
    op.drop_table("trip_swipes")
    op.drop_table("matches")
    op.drop_table("trips")
    op.drop_table("users")
