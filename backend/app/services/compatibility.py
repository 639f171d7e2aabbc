"""Compatibility engine — weighted multi-factor scoring between travellers and trips.

Profile scoring (match requests):
    score = destination_match * 0.30 + date_overlap * 0.25 + interest_similarity * 0.20
          + budget_compatibility * 0.15 + travel_style_match * 0.05 + language_match * 0.05

Trip-pair scoring (discovery / recommendations):
    score = destination_match * 0.30 + date_overlap * 0.25 + interest_similarity * 0.20
          + budget_compatibility * 0.15 + travel_style_match * 0.10

Factors are unweighted values in [0, 100]. A factor whose input is missing
scores 0 and still carries its full weight.

Everything in this module is pure: no I/O, no clock reads, no shared mutable
state. Engines only hold read-only mappings and can be shared freely.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

DESTINATION_MATCH = "destination_match"
DATE_OVERLAP = "date_overlap"
INTEREST_SIMILARITY = "interest_similarity"
BUDGET_COMPATIBILITY = "budget_compatibility"
TRAVEL_STYLE_MATCH = "travel_style_match"
LANGUAGE_MATCH = "language_match"

PROFILE_WEIGHTS = MappingProxyType({
    DESTINATION_MATCH: 0.30,
    DATE_OVERLAP: 0.25,
    INTEREST_SIMILARITY: 0.20,
    BUDGET_COMPATIBILITY: 0.15,
    TRAVEL_STYLE_MATCH: 0.05,
    LANGUAGE_MATCH: 0.05,
})

TRIP_PAIR_WEIGHTS = MappingProxyType({
    DESTINATION_MATCH: 0.30,
    DATE_OVERLAP: 0.25,
    INTEREST_SIMILARITY: 0.20,
    BUDGET_COMPATIBILITY: 0.15,
    TRAVEL_STYLE_MATCH: 0.10,
})

# Symmetric; identical styles always score 100 even when not listed here.
STYLE_COMPATIBILITY = MappingProxyType({
    "budget": MappingProxyType({"budget": 100, "mid-range": 70, "luxury": 20, "backpacker": 90}),
    "mid-range": MappingProxyType({"budget": 70, "mid-range": 100, "luxury": 80, "backpacker": 50}),
    "luxury": MappingProxyType({"budget": 20, "mid-range": 80, "luxury": 100, "backpacker": 10}),
    "backpacker": MappingProxyType({"budget": 90, "mid-range": 50, "luxury": 10, "backpacker": 100}),
})

STYLE_ALIASES = MappingProxyType({
    "backpacking": "backpacker",
    "midrange": "mid-range",
    "mid_range": "mid-range",
    "mid range": "mid-range",
})

UNKNOWN_STYLE_SCORE = 50.0
DESTINATION_POINTS_PER_OVERLAP = 20
PREFERRED_BUDGET_HEADROOM = 1.5
WEIGHT_TOLERANCE = 1e-6


class InvalidInput(ValueError):
    """Raised when a required entity is missing from a scoring call."""


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date


@dataclass(frozen=True)
class BudgetRange:
    min: float | None = None
    max: float | None = None
    preferred: float | None = None
    currency: str = "USD"


@dataclass(frozen=True)
class Destination:
    city: str
    country: str
    region: str | None = None

    @property
    def label(self) -> str:
        return ", ".join(part for part in (self.city, self.country) if part)


@dataclass(frozen=True)
class UserProfile:
    id: Any
    interests: Iterable[str] | None = frozenset()
    travel_style: str | None = None
    budget: BudgetRange | None = None
    languages: Iterable[str] | None = frozenset()
    preferred_destinations: Iterable[str] | None = frozenset()
    available_dates: Iterable[DateRange] | None = ()


@dataclass(frozen=True)
class TripProposal:
    id: Any
    destination: Destination | None
    start: date
    end: date
    budget: float | None = None
    currency: str = "USD"
    interests: Iterable[str] | None = frozenset()
    travel_style: str | None = None


@dataclass(frozen=True)
class CompatibilityResult:
    score: int
    factors: Mapping[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"score": self.score, "factors": dict(self.factors)}


@dataclass(frozen=True)
class RankedCandidate:
    candidate: Any
    result: CompatibilityResult


# --- Helpers ---

def _normalized(values: Iterable[str] | None) -> frozenset[str]:
    """Case-insensitive, whitespace-trimmed set; None and blanks drop out."""
    if not values:
        return frozenset()
    return frozenset(v.strip().casefold() for v in values if v and v.strip())


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, float(value)))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def normalize_style(style: str | None) -> str | None:
    if not style or not style.strip():
        return None
    key = style.strip().casefold()
    return STYLE_ALIASES.get(key, key)


# --- Sub-algorithms ---

def date_overlap_percentage(windows: Iterable[DateRange] | None, start: date, end: date) -> float:
    """Share of the [start, end] window covered by the availability windows, as 0-100."""
    if not windows:
        return 0.0
    trip_seconds = (end - start).total_seconds()
    if trip_seconds <= 0:
        return 0.0

    overlap_seconds = 0.0
    for window in windows:
        overlap_start = max(start, window.start)
        overlap_end = min(end, window.end)
        if overlap_start < overlap_end:
            overlap_seconds += (overlap_end - overlap_start).total_seconds()

    return min(overlap_seconds / trip_seconds * 100, 100.0)


def _affordability(budget: BudgetRange) -> tuple[float, float]:
    if budget.max is not None:
        upper = float(budget.max)
    elif budget.preferred is not None:
        upper = float(budget.preferred) * PREFERRED_BUDGET_HEADROOM
    else:
        upper = math.inf
    lower = float(budget.min) if budget.min is not None else 0.0
    return lower, upper


def budget_band_compatibility(
    requester_budget: BudgetRange | None,
    recipient_budget: BudgetRange | None,
    trip_budget: float | None,
) -> float:
    """100 inside the shared affordable band, decaying linearly outside it."""
    if requester_budget is None or recipient_budget is None or trip_budget is None:
        return 0.0

    requester_min, requester_max = _affordability(requester_budget)
    recipient_min, recipient_max = _affordability(recipient_budget)
    band_min = max(requester_min, recipient_min)
    band_max = min(requester_max, recipient_max)
    budget = float(trip_budget)

    if band_min <= budget <= band_max:
        return 100.0
    if budget < band_min:
        return max(0.0, 100 * (1 - (band_min - budget) / band_min))
    return max(0.0, 100 * (1 - (budget - band_max) / budget))


def travel_style_compatibility(
    style_a: str | None,
    style_b: str | None,
    matrix: Mapping[str, Mapping[str, float]] = STYLE_COMPATIBILITY,
) -> float:
    a = normalize_style(style_a)
    b = normalize_style(style_b)
    if a is None or b is None:
        return 0.0
    if a == b:
        return 100.0
    value = matrix.get(a, {}).get(b)
    return float(value) if value is not None else UNKNOWN_STYLE_SCORE


# --- Profile factors: (requester, recipient, trip, style_matrix) -> float ---

def _destination_match(requester, recipient, trip, style_matrix) -> float:
    common = _normalized(requester.preferred_destinations) & _normalized(recipient.preferred_destinations)
    return min(len(common) * DESTINATION_POINTS_PER_OVERLAP, 100)


def _date_overlap(requester, recipient, trip, style_matrix) -> float:
    if trip.start is None or trip.end is None:
        return 0.0
    return min(
        date_overlap_percentage(requester.available_dates, trip.start, trip.end),
        date_overlap_percentage(recipient.available_dates, trip.start, trip.end),
    )


def _interest_similarity(requester, recipient, trip, style_matrix) -> float:
    a = _normalized(requester.interests)
    b = _normalized(recipient.interests)
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b) * 100


def _budget_compatibility(requester, recipient, trip, style_matrix) -> float:
    return budget_band_compatibility(requester.budget, recipient.budget, trip.budget)


def _travel_style_match(requester, recipient, trip, style_matrix) -> float:
    return travel_style_compatibility(requester.travel_style, recipient.travel_style, style_matrix)


def _language_match(requester, recipient, trip, style_matrix) -> float:
    return 100.0 if _normalized(requester.languages) & _normalized(recipient.languages) else 0.0


PROFILE_FACTORS = MappingProxyType({
    DESTINATION_MATCH: _destination_match,
    DATE_OVERLAP: _date_overlap,
    INTEREST_SIMILARITY: _interest_similarity,
    BUDGET_COMPATIBILITY: _budget_compatibility,
    TRAVEL_STYLE_MATCH: _travel_style_match,
    LANGUAGE_MATCH: _language_match,
})


# --- Trip-pair factors: (own_trip, other_trip, style_matrix) -> float ---

def _trip_destination_match(own, other, style_matrix) -> float:
    if own.destination is None or other.destination is None:
        return 0.0
    a = own.destination.label.strip().casefold()
    b = other.destination.label.strip().casefold()
    if not a or not b:
        return 0.0
    return 100.0 if a in b or b in a else 0.0


def _trip_date_overlap(own, other, style_matrix) -> float:
    if own.start > other.end or own.end < other.start:
        return 0.0
    overlap = (min(own.end, other.end) - max(own.start, other.start)).total_seconds()
    span = (max(own.end, other.end) - min(own.start, other.start)).total_seconds()
    if span <= 0:
        return 0.0
    return overlap / span * 100


def _trip_interest_similarity(own, other, style_matrix) -> float:
    a = _normalized(own.interests)
    b = _normalized(other.interests)
    if not a or not b:
        return 0.0
    return len(a & b) / max(len(a), len(b)) * 100


def _trip_budget_compatibility(own, other, style_matrix) -> float:
    if own.budget is None or other.budget is None:
        return 0.0
    average = (own.budget + other.budget) / 2
    if average <= 0:
        return 0.0
    return max(0.0, 100 - abs(own.budget - other.budget) / average * 100)


def _trip_travel_style_match(own, other, style_matrix) -> float:
    return travel_style_compatibility(own.travel_style, other.travel_style, style_matrix)


TRIP_PAIR_FACTORS = MappingProxyType({
    DESTINATION_MATCH: _trip_destination_match,
    DATE_OVERLAP: _trip_date_overlap,
    INTEREST_SIMILARITY: _trip_interest_similarity,
    BUDGET_COMPATIBILITY: _trip_budget_compatibility,
    TRAVEL_STYLE_MATCH: _trip_travel_style_match,
})


def _validate_weights(weights: Mapping[str, float], registry: Mapping[str, Callable]) -> None:
    unknown = set(weights) - set(registry)
    if unknown:
        raise ValueError(f"Unknown compatibility factors: {sorted(unknown)}")
    if any(w < 0 for w in weights.values()):
        raise ValueError("Compatibility weights must be non-negative")
    total = sum(weights.values())
    if not math.isclose(total, 1.0, abs_tol=WEIGHT_TOLERANCE):
        raise ValueError(f"Compatibility weights must sum to 1.0, got {total:.6f}")


class CompatibilityEngine:
    """Scores traveller pairs against a trip, and trips against each other.

    The weight maps double as factor selection: only the factors named in a
    map are computed. Pass a reduced map to score on a subset of factors;
    its weights must still sum to 1.0.
    """

    def __init__(
        self,
        weights: Mapping[str, float] = PROFILE_WEIGHTS,
        trip_weights: Mapping[str, float] = TRIP_PAIR_WEIGHTS,
        style_matrix: Mapping[str, Mapping[str, float]] = STYLE_COMPATIBILITY,
    ):
        _validate_weights(weights, PROFILE_FACTORS)
        _validate_weights(trip_weights, TRIP_PAIR_FACTORS)
        self.weights = MappingProxyType(dict(weights))
        self.trip_weights = MappingProxyType(dict(trip_weights))
        self.style_matrix = style_matrix

    def score(self, requester: UserProfile, recipient: UserProfile, trip: TripProposal) -> CompatibilityResult:
        """Compatibility of two travellers for one trip."""
        for name, value in (("requester", requester), ("recipient", recipient), ("trip", trip)):
            if value is None:
                raise InvalidInput(f"{name} is required")

        factors = {
            name: _clamp(PROFILE_FACTORS[name](requester, recipient, trip, self.style_matrix))
            for name in self.weights
        }
        return self._combine(factors, self.weights)

    def score_trips(self, own_trip: TripProposal, other_trip: TripProposal) -> CompatibilityResult:
        """Compatibility of a candidate trip with the caller's own trip."""
        for name, value in (("own_trip", own_trip), ("other_trip", other_trip)):
            if value is None:
                raise InvalidInput(f"{name} is required")

        factors = {
            name: _clamp(TRIP_PAIR_FACTORS[name](own_trip, other_trip, self.style_matrix))
            for name in self.trip_weights
        }
        return self._combine(factors, self.trip_weights)

    @staticmethod
    def _combine(factors: dict[str, float], weights: Mapping[str, float]) -> CompatibilityResult:
        total = sum(factors[name] * weight for name, weight in weights.items())
        score = int(_clamp(round_half_up(total)))
        return CompatibilityResult(score=score, factors=MappingProxyType(factors))


@lru_cache
def default_engine() -> CompatibilityEngine:
    return CompatibilityEngine()


def rank_candidates(
    score_fn: Callable[[Any], CompatibilityResult],
    candidates: Iterable[Any],
    min_score: int | None = None,
    limit: int | None = None,
) -> list[RankedCandidate]:
    """Score every candidate, drop those under min_score, best first.

    Ties keep their input order.
    """
    ranked = []
    for candidate in candidates:
        result = score_fn(candidate)
        if min_score is not None and result.score < min_score:
            continue
        ranked.append(RankedCandidate(candidate=candidate, result=result))

    ranked.sort(key=lambda item: item.result.score, reverse=True)
    if limit is not None:
        return ranked[:limit]
    return ranked
