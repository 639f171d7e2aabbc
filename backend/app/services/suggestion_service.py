"""Suggestion service — trip ideas, destination safety and budget estimates.

All functions are pure. Anything that depends on the calendar takes the
date explicitly so results are reproducible.
"""

from collections import Counter
from datetime import date
from types import MappingProxyType
from typing import Iterable

from app.services.compatibility import normalize_style, round_half_up

DESTINATION_CLUSTERS = MappingProxyType({
    "beach": ("Bali", "Maldives", "Goa", "Phuket", "Santorini"),
    "mountain": ("Nepal", "Switzerland", "Himachal Pradesh", "Colorado", "Patagonia"),
    "cultural": ("Kyoto", "Rome", "Istanbul", "Rajasthan", "Morocco"),
    "urban": ("Tokyo", "New York", "London", "Singapore", "Dubai"),
})
DEFAULT_CLUSTER = "beach"

INTEREST_DESTINATIONS = MappingProxyType({
    "adventure": ("New Zealand", "Costa Rica", "Nepal"),
    "culture": ("India", "Egypt", "Peru"),
    "food": ("Italy", "Japan", "Thailand"),
    "nightlife": ("Berlin", "Barcelona", "Bangkok"),
    "nature": ("Iceland", "Norway", "Canada"),
})

COMPLEMENTARY_INTERESTS = MappingProxyType({
    "adventure": ("hiking", "rock climbing", "water sports"),
    "culture": ("museums", "historical sites", "local festivals"),
    "food": ("cooking classes", "food tours", "local markets"),
    "nightlife": ("bars", "clubs", "live music"),
    "nature": ("wildlife", "photography", "camping"),
})

# Keyed by calendar month (1 = January)
SEASONAL_DESTINATIONS = MappingProxyType({
    1: ("Dubai", "Thailand", "India"),
    2: ("Japan", "Singapore", "Vietnam"),
    3: ("Egypt", "Morocco", "Nepal"),
    4: ("Turkey", "Greece", "Spain"),
    5: ("Europe", "Mediterranean", "Balkans"),
    6: ("Scandinavia", "Russia", "Eastern Europe"),
    7: ("Indonesia", "Malaysia", "Philippines"),
    8: ("Romania", "Bulgaria", "Baltic States"),
    9: ("India", "Nepal", "Central Asia"),
    10: ("Morocco", "Egypt", "Jordan"),
    11: ("India", "Myanmar", "Laos"),
    12: ("Thailand", "Cambodia", "Vietnam"),
})

BASE_SAFETY_SCORES = MappingProxyType({
    "Japan": 95,
    "Singapore": 94,
    "Switzerland": 93,
    "Norway": 92,
    "Denmark": 91,
    "Canada": 90,
    "Australia": 89,
    "Germany": 88,
    "United Kingdom": 87,
    "France": 85,
    "Italy": 83,
    "Spain": 82,
    "Thailand": 78,
    "Turkey": 70,
    "Morocco": 68,
    "India": 65,
    "Egypt": 60,
})
DEFAULT_SAFETY_SCORE = 70

MONSOON_COUNTRIES = frozenset({"India"})
MONSOON_MONTHS = range(6, 11)  # June - October
TYPHOON_COUNTRIES = frozenset({"Thailand", "Philippines", "Indonesia"})
TYPHOON_MONTHS = range(6, 12)  # June - November

# Per-day costs in USD
BASE_DAILY_COSTS = MappingProxyType({
    "budget": MappingProxyType({"daily": 30, "accommodation": 15, "food": 10, "transport": 5}),
    "mid-range": MappingProxyType({"daily": 80, "accommodation": 40, "food": 25, "transport": 15}),
    "luxury": MappingProxyType({"daily": 200, "accommodation": 120, "food": 50, "transport": 30}),
})
COST_STYLE_FALLBACKS = MappingProxyType({"backpacker": "budget"})
DEFAULT_COST_STYLE = "mid-range"
ACTIVITY_COST = 20

DESTINATION_COST_MULTIPLIERS = MappingProxyType({
    "Switzerland": 2.0,
    "Norway": 1.9,
    "Japan": 1.8,
    "Singapore": 1.5,
    "Turkey": 0.7,
    "Thailand": 0.6,
    "Morocco": 0.6,
    "Vietnam": 0.5,
    "Indonesia": 0.5,
    "India": 0.4,
})


def _dedup(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


def similar_destinations(past_destinations: Iterable[str], limit: int = 3) -> list[str]:
    """Destinations from the cluster the user has visited most."""
    past_destinations = list(past_destinations)
    counts = Counter()
    for destination in past_destinations:
        needle = destination.strip().casefold()
        for cluster, members in DESTINATION_CLUSTERS.items():
            if any(needle == m.casefold() for m in members):
                counts[cluster] += 1

    cluster = counts.most_common(1)[0][0] if counts else DEFAULT_CLUSTER
    visited = {d.strip().casefold() for d in past_destinations}
    fresh = [d for d in DESTINATION_CLUSTERS[cluster] if d.casefold() not in visited]
    return (fresh or list(DESTINATION_CLUSTERS[cluster]))[:limit]


def complementary_destinations(interests: Iterable[str], limit: int = 3) -> list[str]:
    suggestions = []
    for interest in interests:
        suggestions.extend(INTEREST_DESTINATIONS.get(interest, ()))
    return _dedup(suggestions)[:limit]


def complementary_interests(interests: Iterable[str], limit: int = 5) -> list[str]:
    suggestions = []
    for interest in interests:
        suggestions.extend(COMPLEMENTARY_INTERESTS.get(interest, ()))
    return _dedup(suggestions)[:limit]


def seasonal_destinations(today: date) -> list[str]:
    return list(SEASONAL_DESTINATIONS.get(today.month, ("Popular destinations",)))


def generate_trip_suggestions(
    past_trips: Iterable[tuple[str, Iterable[str]]],
    user_interests: Iterable[str],
    today: date,
) -> list[dict]:
    """Build the three suggestion blocks shown on the home screen.

    Args:
        past_trips: (destination_city, interests) pairs, most recent first
        user_interests: the user's profile interests
        today: reference date for the seasonal block

    Returns:
        List of suggestion dicts: type, title, destinations, interests, confidence
    """
    destination_counts = Counter()
    interest_counts = Counter()
    for city, interests in past_trips:
        if city:
            destination_counts[city] += 1
        interest_counts.update(interests or ())

    popular_destinations = [d for d, _ in destination_counts.most_common(5)]
    preferred_interests = [i for i, _ in interest_counts.most_common(5)]
    user_interests = list(user_interests or ())

    return [
        {
            "type": "similar_destination",
            "title": "Explore Similar Destinations",
            "destinations": similar_destinations(popular_destinations),
            "interests": preferred_interests,
            "confidence": 0.8,
        },
        {
            "type": "new_experience",
            "title": "Try Something New",
            "destinations": complementary_destinations(user_interests),
            "interests": complementary_interests(preferred_interests),
            "confidence": 0.6,
        },
        {
            "type": "seasonal",
            "title": "Perfect for This Season",
            "destinations": seasonal_destinations(today),
            "interests": user_interests,
            "confidence": 0.7,
        },
    ]


def seasonal_safety_adjustment(country: str, start: date) -> int:
    if country in MONSOON_COUNTRIES and start.month in MONSOON_MONTHS:
        return -10
    if country in TYPHOON_COUNTRIES and start.month in TYPHOON_MONTHS:
        return -5
    return 0


def calculate_safety_score(country: str, start: date) -> int:
    """Base destination score adjusted for the season of travel, clamped to 0-100."""
    base = BASE_SAFETY_SCORES.get(country, DEFAULT_SAFETY_SCORE)
    return max(0, min(100, base + seasonal_safety_adjustment(country, start)))


def estimate_trip_budget(
    country: str,
    duration_days: int,
    travel_style: str | None = None,
    activities: Iterable[str] = (),
) -> dict:
    """Rough trip cost from per-style daily costs and a destination multiplier."""
    style = normalize_style(travel_style) or DEFAULT_COST_STYLE
    style = COST_STYLE_FALLBACKS.get(style, style)
    costs = BASE_DAILY_COSTS.get(style, BASE_DAILY_COSTS[DEFAULT_COST_STYLE])
    multiplier = DESTINATION_COST_MULTIPLIERS.get(country, 1.0)

    daily_cost = costs["daily"] * multiplier
    activity_costs = len(list(activities)) * ACTIVITY_COST * multiplier

    return {
        "total": round_half_up(daily_cost * duration_days + activity_costs),
        "daily": round_half_up(daily_cost),
        "breakdown": {
            "accommodation": round_half_up(costs["accommodation"] * multiplier * duration_days),
            "food": round_half_up(costs["food"] * multiplier * duration_days),
            "transport": round_half_up(costs["transport"] * multiplier * duration_days),
            "activities": round_half_up(activity_costs),
        },
    }
