"""Tests for trip suggestions, safety scores and budget estimates."""

from datetime import date

import pytest

from app.services.suggestion_service import (
    calculate_safety_score,
    complementary_destinations,
    complementary_interests,
    estimate_trip_budget,
    generate_trip_suggestions,
    seasonal_destinations,
    seasonal_safety_adjustment,
    similar_destinations,
)


# =============================================================================
# Suggestions
# =============================================================================

class TestSimilarDestinations:

    def test_most_visited_cluster_without_visited_places(self):
        assert similar_destinations(["Bali", "Goa", "Rome"]) == ["Maldives", "Phuket", "Santorini"]

    def test_case_insensitive(self):
        assert similar_destinations(["tokyo", "LONDON"]) == ["New York", "Singapore", "Dubai"]

    def test_defaults_to_beach(self):
        assert similar_destinations([]) == ["Bali", "Maldives", "Goa"]
        assert similar_destinations(["Atlantis"]) == ["Bali", "Maldives", "Goa"]

    def test_accepts_generator(self):
        assert similar_destinations(d for d in ["Kyoto"]) == ["Rome", "Istanbul", "Rajasthan"]


class TestComplementary:

    def test_destinations_deduplicated_and_limited(self):
        assert complementary_destinations(["food", "culture"]) == ["Italy", "Japan", "Thailand"]

    def test_unknown_interest_ignored(self):
        assert complementary_destinations(["knitting", "nature"]) == ["Iceland", "Norway", "Canada"]

    def test_interests_limited_to_five(self):
        result = complementary_interests(["adventure", "culture"])
        assert result == ["hiking", "rock climbing", "water sports", "museums", "historical sites"]


class TestGenerateTripSuggestions:

    def test_three_blocks_with_confidence(self):
        past = [("Bali", ["beach", "food"]), ("Goa", ["food"]), ("Bali", ["nightlife"])]
        suggestions = generate_trip_suggestions(past, ["adventure"], date(2026, 10, 18))

        assert [s["type"] for s in suggestions] == ["similar_destination", "new_experience", "seasonal"]
        assert [s["confidence"] for s in suggestions] == [0.8, 0.6, 0.7]

    def test_blocks_use_history_and_profile(self):
        past = [("Bali", ["beach", "food"]), ("Goa", ["food"]), ("Bali", ["nightlife"])]
        similar, new, seasonal = generate_trip_suggestions(past, ["adventure"], date(2026, 10, 18))

        assert similar["destinations"] == ["Maldives", "Phuket", "Santorini"]
        assert similar["interests"][0] == "food"
        assert new["destinations"] == ["New Zealand", "Costa Rica", "Nepal"]
        assert new["interests"][:3] == ["cooking classes", "food tours", "local markets"]
        assert seasonal["destinations"] == ["Morocco", "Egypt", "Jordan"]
        assert seasonal["interests"] == ["adventure"]

    def test_new_user(self):
        similar, new, seasonal = generate_trip_suggestions([], [], date(2026, 1, 5))
        assert similar["destinations"] == ["Bali", "Maldives", "Goa"]
        assert new["destinations"] == []
        assert seasonal["destinations"] == ["Dubai", "Thailand", "India"]

    def test_seasonal_uses_month(self):
        assert seasonal_destinations(date(2026, 12, 1)) == ["Thailand", "Cambodia", "Vietnam"]


# =============================================================================
# Safety
# =============================================================================

class TestSafetyScore:

    @pytest.mark.parametrize("country, start, expected", [
        ("Japan", date(2026, 4, 1), 95),
        ("India", date(2026, 7, 10), 55),
        ("India", date(2026, 12, 10), 65),
        ("Thailand", date(2026, 8, 1), 73),
        ("Thailand", date(2026, 12, 1), 78),
        ("Atlantis", date(2026, 8, 1), 70),
    ])
    def test_base_with_seasonal_adjustment(self, country, start, expected):
        assert calculate_safety_score(country, start) == expected

    def test_monsoon_window_bounds(self):
        assert seasonal_safety_adjustment("India", date(2026, 5, 31)) == 0
        assert seasonal_safety_adjustment("India", date(2026, 6, 1)) == -10
        assert seasonal_safety_adjustment("India", date(2026, 10, 31)) == -10
        assert seasonal_safety_adjustment("India", date(2026, 11, 1)) == 0


# =============================================================================
# Budget estimate
# =============================================================================

class TestBudgetEstimate:

    def test_backpacker_in_thailand(self):
        estimate = estimate_trip_budget("Thailand", 10, "backpacker", ["diving", "hiking"])
        assert estimate == {
            "total": 204,
            "daily": 18,
            "breakdown": {"accommodation": 90, "food": 60, "transport": 30, "activities": 24},
        }

    def test_defaults_to_mid_range_without_multiplier(self):
        estimate = estimate_trip_budget("Peru", 3)
        assert estimate["daily"] == 80
        assert estimate["total"] == 240
        assert estimate["breakdown"]["activities"] == 0

    def test_unknown_style_uses_mid_range(self):
        assert estimate_trip_budget("Peru", 3, "glamping") == estimate_trip_budget("Peru", 3)

    def test_luxury_in_switzerland(self):
        estimate = estimate_trip_budget("Switzerland", 2, "Luxury")
        assert estimate["daily"] == 400
        assert estimate["total"] == 800
