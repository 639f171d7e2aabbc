"""Pydantic schemas package."""

from app.schemas.user import (
    AvailabilityWindow,
    UserRegister,
    UserLogin,
    UserRead,
    TravelProfileBase,
    TravelProfileRead,
    TravelProfileUpdate,
)
from app.schemas.trip import (
    TripBase,
    TripCreate,
    TripUpdate,
    TripRead,
    TripSummary,
    JoinRequestCreate,
    JoinRequestUpdate,
    JoinRequestRead,
)
from app.schemas.match import (
    CompatibilityRead,
    TripCandidate,
    Pagination,
    DiscoverResponse,
    SwipeRequest,
    SwipeResponse,
    TripPairingRead,
    MyMatchesResponse,
    MatchRequestCreate,
    MatchStatusUpdate,
    MatchRead,
)
from app.schemas.ai import (
    TripSuggestion,
    SafetyScoreRead,
    BudgetEstimateRequest,
    BudgetBreakdown,
    BudgetEstimateRead,
)

__all__ = [
    # User
    "AvailabilityWindow",
    "UserRegister",
    "UserLogin",
    "UserRead",
    "TravelProfileBase",
    "TravelProfileRead",
    "TravelProfileUpdate",
    # Trip
    "TripBase",
    "TripCreate",
    "TripUpdate",
    "TripRead",
    "TripSummary",
    "JoinRequestCreate",
    "JoinRequestUpdate",
    "JoinRequestRead",
    # Match
    "CompatibilityRead",
    "TripCandidate",
    "Pagination",
    "DiscoverResponse",
    "SwipeRequest",
    "SwipeResponse",
    "TripPairingRead",
    "MyMatchesResponse",
    "MatchRequestCreate",
    "MatchStatusUpdate",
    "MatchRead",
    # AI
    "TripSuggestion",
    "SafetyScoreRead",
    "BudgetEstimateRequest",
    "BudgetBreakdown",
    "BudgetEstimateRead",
]
