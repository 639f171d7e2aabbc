"""
Shared factories and mocks for the Travio backend test suite.

Everything here is in-memory: engine inputs are plain dataclasses, ORM rows
are stood in for by SimpleNamespace objects, and the async DB session is a
MagicMock whose execute() returns queued result objects. No database,
Redis or network access is required.
"""

import uuid
from datetime import date, datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from app.services.compatibility import BudgetRange, DateRange, Destination, TripProposal, UserProfile


# =============================================================================
# Engine input factories
# =============================================================================

def make_profile(**overrides) -> UserProfile:
    defaults = {
        "id": uuid.uuid4(),
        "interests": frozenset({"food", "culture"}),
        "travel_style": "mid-range",
        "budget": BudgetRange(min=500, max=1500),
        "languages": frozenset({"English"}),
        "preferred_destinations": frozenset({"Kyoto"}),
        "available_dates": (DateRange(date(2026, 6, 1), date(2026, 6, 15)),),
    }
    defaults.update(overrides)
    return UserProfile(**defaults)


def make_proposal(**overrides) -> TripProposal:
    defaults = {
        "id": uuid.uuid4(),
        "destination": Destination(city="Kyoto", country="Japan"),
        "start": date(2026, 6, 1),
        "end": date(2026, 6, 15),
        "budget": 1000.0,
        "interests": frozenset({"food"}),
        "travel_style": "mid-range",
    }
    defaults.update(overrides)
    return TripProposal(**defaults)


# =============================================================================
# ORM stand-ins
# =============================================================================

def make_user(**overrides) -> SimpleNamespace:
    defaults = {
        "id": uuid.uuid4(),
        "email": "traveller@example.com",
        "display_name": "Test Traveller",
        "hashed_password": "",
        "is_active": True,
        "last_login_at": None,
        "created_at": None,
        "bio": None,
        "nationality": None,
        "interests": ["food", "culture"],
        "travel_style": "mid-range",
        "budget_min": 500.0,
        "budget_max": 1500.0,
        "budget_preferred": None,
        "budget_currency": "USD",
        "languages": ["English"],
        "preferred_destinations": ["Kyoto"],
        "available_dates": [{"start": "2026-06-01", "end": "2026-06-15"}],
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def make_trip(**overrides) -> SimpleNamespace:
    defaults = {
        "id": uuid.uuid4(),
        "creator_id": uuid.uuid4(),
        "title": "Kyoto in June",
        "description": None,
        "destination_city": "Kyoto",
        "destination_country": "Japan",
        "destination_region": None,
        "latitude": None,
        "longitude": None,
        "geocode_status": "pending",
        "start_date": date(2026, 6, 1),
        "end_date": date(2026, 6, 15),
        "travel_mode": None,
        "budget_estimated": 1000.0,
        "budget_currency": "USD",
        "interests": ["food"],
        "travel_style": "mid-range",
        "is_open_to_partners": True,
        "max_participants": 4,
        "current_participants": 1,
        "privacy": "public",
        "status": "planning",
        "duration_days": 14,
        "created_at": None,
        "updated_at": None,
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def make_match(**overrides) -> SimpleNamespace:
    defaults = {
        "id": uuid.uuid4(),
        "requester_id": uuid.uuid4(),
        "recipient_id": uuid.uuid4(),
        "trip_id": uuid.uuid4(),
        "status": "pending",
        "compatibility_score": 72,
        "match_factors": {"destination_match": 20.0},
        "message": None,
        "expires_at": datetime(2026, 10, 25, tzinfo=timezone.utc),
        "is_active": True,
        "created_at": datetime(2026, 10, 18, tzinfo=timezone.utc),
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


# =============================================================================
# Async session mock
# =============================================================================

def scalar_result(value):
    """Result object for a query ending in scalar_one_or_none()."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def scalars_result(values):
    """Result object for a query ending in scalars().all()."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = list(values)
    return result


def make_db(*results) -> MagicMock:
    """AsyncSession stand-in; each execute() call returns the next queued result."""
    db = MagicMock()
    db.execute = AsyncMock(side_effect=list(results))
    db.flush = AsyncMock()
    db.refresh = AsyncMock()
    db.delete = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.add = MagicMock()
    return db
