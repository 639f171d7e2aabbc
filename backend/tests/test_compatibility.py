"""
Tests for the compatibility engine.

Covers:
- Score and factor bounds
- Weighted-sum identity against the default weight tables
- Requester/recipient symmetry of the set-based factors and date overlap
- Fully aligned and fully misaligned pairs
- Date overlap, budget band and travel style sub-algorithms
- Trip-vs-trip scoring used by discovery
- Weight configuration validation and reduced factor sets
- Candidate ranking

All tests are pure Python: no database, no clock.
"""

from datetime import date, datetime

import pytest

from app.services.compatibility import (
    BUDGET_COMPATIBILITY,
    DATE_OVERLAP,
    DESTINATION_MATCH,
    INTEREST_SIMILARITY,
    LANGUAGE_MATCH,
    PROFILE_WEIGHTS,
    TRAVEL_STYLE_MATCH,
    TRIP_PAIR_WEIGHTS,
    BudgetRange,
    CompatibilityEngine,
    CompatibilityResult,
    DateRange,
    Destination,
    InvalidInput,
    budget_band_compatibility,
    date_overlap_percentage,
    default_engine,
    normalize_style,
    rank_candidates,
    round_half_up,
    travel_style_compatibility,
)
from conftest import make_profile, make_proposal


JUNE_1 = date(2026, 6, 1)
JUNE_15 = date(2026, 6, 15)


def aligned_pair():
    shared = dict(
        interests=frozenset({"food", "culture", "hiking"}),
        travel_style="budget",
        languages=frozenset({"English", "Spanish"}),
        preferred_destinations=frozenset({"Kyoto", "Tokyo", "Osaka", "Nara", "Hakone"}),
        available_dates=(DateRange(date(2026, 5, 20), date(2026, 6, 30)),),
    )
    requester = make_profile(budget=BudgetRange(min=500, max=1500), **shared)
    recipient = make_profile(budget=BudgetRange(min=800, max=2000), **shared)
    trip = make_proposal(budget=1000.0, travel_style="budget", interests=shared["interests"])
    return requester, recipient, trip


def misaligned_pair():
    requester = make_profile(
        interests=frozenset({"hiking"}),
        travel_style="budget",
        budget=BudgetRange(min=100, max=200),
        languages=frozenset({"English"}),
        preferred_destinations=frozenset({"Kyoto"}),
        available_dates=(DateRange(date(2026, 1, 1), date(2026, 1, 10)),),
    )
    recipient = make_profile(
        interests=frozenset({"nightlife"}),
        travel_style="luxury",
        budget=BudgetRange(min=150, max=300),
        languages=frozenset({"Japanese"}),
        preferred_destinations=frozenset({"Lima"}),
        available_dates=(DateRange(date(2026, 2, 1), date(2026, 2, 10)),),
    )
    trip = make_proposal(budget=10000.0)
    return requester, recipient, trip


# =============================================================================
# Bounds and identities
# =============================================================================

class TestScoreBounds:

    def test_score_and_factors_within_bounds(self):
        engine = CompatibilityEngine()
        for requester, recipient, trip in (aligned_pair(), misaligned_pair()):
            result = engine.score(requester, recipient, trip)
            assert 0 <= result.score <= 100
            for value in result.factors.values():
                assert 0 <= value <= 100

    def test_factor_breakdown_has_every_profile_factor(self):
        result = CompatibilityEngine().score(make_profile(), make_profile(), make_proposal())
        assert set(result.factors) == set(PROFILE_WEIGHTS)

    def test_weighted_sum_identity(self):
        requester = make_profile(interests=frozenset({"food", "art", "hiking"}))
        recipient = make_profile(
            interests=frozenset({"food", "surfing"}),
            budget=BudgetRange(min=900, max=3000),
            available_dates=(DateRange(date(2026, 6, 10), date(2026, 6, 20)),),
        )
        result = CompatibilityEngine().score(requester, recipient, make_proposal())
        expected = round_half_up(sum(result.factors[f] * w for f, w in PROFILE_WEIGHTS.items()))
        assert result.score == expected

    def test_default_profiles_score(self):
        # One shared destination (20), everything else fully aligned
        result = CompatibilityEngine().score(make_profile(), make_profile(), make_proposal())
        assert result.factors[DESTINATION_MATCH] == 20
        assert result.score == 76

    def test_idempotent(self):
        engine = CompatibilityEngine()
        requester, recipient, trip = aligned_pair()
        first = engine.score(requester, recipient, trip)
        second = engine.score(requester, recipient, trip)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_result_factors_are_read_only(self):
        result = CompatibilityEngine().score(make_profile(), make_profile(), make_proposal())
        with pytest.raises(TypeError):
            result.factors[DESTINATION_MATCH] = 0

    def test_to_dict_is_json_friendly(self):
        result = CompatibilityEngine().score(make_profile(), make_profile(), make_proposal())
        data = result.to_dict()
        assert data["score"] == result.score
        assert isinstance(data["factors"], dict)


class TestSymmetry:

    @pytest.mark.parametrize("factor", [DESTINATION_MATCH, INTEREST_SIMILARITY, LANGUAGE_MATCH, DATE_OVERLAP])
    def test_swapping_parties_keeps_symmetric_factors(self, factor):
        requester = make_profile(
            interests=frozenset({"food", "art"}),
            languages=frozenset({"English", "French"}),
            preferred_destinations=frozenset({"Kyoto", "Paris"}),
            available_dates=(DateRange(date(2026, 6, 5), date(2026, 6, 12)),),
        )
        recipient = make_profile(
            interests=frozenset({"food", "music", "hiking"}),
            languages=frozenset({"French"}),
            preferred_destinations=frozenset({"Paris", "Rome"}),
            available_dates=(DateRange(date(2026, 6, 1), date(2026, 6, 9)),),
        )
        trip = make_proposal()
        engine = CompatibilityEngine()

        forward = engine.score(requester, recipient, trip)
        backward = engine.score(recipient, requester, trip)
        assert forward.factors[factor] == backward.factors[factor]


# =============================================================================
# Extremes
# =============================================================================

class TestExtremes:

    def test_fully_aligned_pair_scores_100(self):
        result = CompatibilityEngine().score(*aligned_pair())
        assert result.score == 100
        assert all(value == 100 for value in result.factors.values())

    def test_fully_misaligned_pair_scores_near_zero(self):
        result = CompatibilityEngine().score(*misaligned_pair())
        # Known styles use the matrix value, not the unknown-pair fallback of 50
        assert result.factors[TRAVEL_STYLE_MATCH] == 20
        assert result.factors[DESTINATION_MATCH] == 0
        assert result.factors[DATE_OVERLAP] == 0
        assert result.factors[INTEREST_SIMILARITY] == 0
        assert result.factors[LANGUAGE_MATCH] == 0
        assert result.score <= 2

    def test_missing_entity_raises_invalid_input(self):
        engine = CompatibilityEngine()
        with pytest.raises(InvalidInput, match="recipient"):
            engine.score(make_profile(), None, make_proposal())
        with pytest.raises(InvalidInput, match="trip"):
            engine.score(make_profile(), make_profile(), None)

    def test_invalid_input_is_a_value_error(self):
        assert issubclass(InvalidInput, ValueError)

    def test_sparse_profile_scores_zero_on_missing_factors(self):
        sparse = make_profile(
            interests=frozenset(),
            travel_style=None,
            budget=None,
            languages=None,
            preferred_destinations=None,
            available_dates=None,
        )
        result = CompatibilityEngine().score(sparse, make_profile(), make_proposal())
        assert result.score == 0
        assert all(value == 0 for value in result.factors.values())


# =============================================================================
# Sub-algorithms
# =============================================================================

class TestDateOverlap:

    def test_partial_window(self):
        windows = [DateRange(date(2026, 6, 10), date(2026, 6, 20))]
        assert date_overlap_percentage(windows, JUNE_1, JUNE_15) == pytest.approx(5 / 14 * 100)

    def test_partial_window_through_engine_takes_minimum(self):
        requester = make_profile(available_dates=(DateRange(date(2026, 6, 10), date(2026, 6, 20)),))
        recipient = make_profile()
        result = CompatibilityEngine().score(requester, recipient, make_proposal())
        assert result.factors[DATE_OVERLAP] == pytest.approx(5 / 14 * 100)

    def test_windows_are_summed_and_capped(self):
        windows = [
            DateRange(date(2026, 5, 1), date(2026, 6, 10)),
            DateRange(date(2026, 6, 5), date(2026, 7, 1)),
        ]
        assert date_overlap_percentage(windows, JUNE_1, JUNE_15) == 100

    def test_no_windows(self):
        assert date_overlap_percentage([], JUNE_1, JUNE_15) == 0
        assert date_overlap_percentage(None, JUNE_1, JUNE_15) == 0

    def test_zero_length_trip(self):
        windows = [DateRange(JUNE_1, JUNE_15)]
        assert date_overlap_percentage(windows, JUNE_1, JUNE_1) == 0

    def test_datetimes_are_accepted(self):
        start = datetime(2026, 6, 1, 12, 0)
        end = datetime(2026, 6, 2, 12, 0)
        windows = [DateRange(datetime(2026, 6, 1, 0, 0), datetime(2026, 6, 2, 0, 0))]
        assert date_overlap_percentage(windows, start, end) == pytest.approx(50.0)


class TestBudgetBand:

    def test_inside_band(self):
        score = budget_band_compatibility(BudgetRange(500, 1500), BudgetRange(800, 2000), 1000)
        assert score == 100

    def test_below_band_decays_linearly(self):
        # Band [800, 1500]; 400 is half of the lower edge
        score = budget_band_compatibility(BudgetRange(500, 1500), BudgetRange(800, 2000), 400)
        assert score == pytest.approx(50.0)

    def test_above_band_decays_linearly(self):
        score = budget_band_compatibility(BudgetRange(500, 1500), BudgetRange(800, 2000), 3000)
        assert score == pytest.approx(50.0)

    def test_band_edges_are_inclusive(self):
        assert budget_band_compatibility(BudgetRange(0, 100), BudgetRange(0, 100), 0) == 100
        assert budget_band_compatibility(BudgetRange(0, 100), BudgetRange(0, 100), 100) == 100

    def test_far_outside_approaches_zero(self):
        assert budget_band_compatibility(BudgetRange(500, 600), BudgetRange(500, 600), 1_000_000) < 1

    def test_preferred_amount_gives_headroom(self):
        # No max: preferred 1000 allows up to 1500
        score = budget_band_compatibility(BudgetRange(preferred=1000), BudgetRange(min=0, max=2000), 1400)
        assert score == 100

    def test_unbounded_when_no_max_or_preferred(self):
        assert budget_band_compatibility(BudgetRange(min=100), BudgetRange(min=200), 50_000) == 100

    def test_missing_budget_scores_zero(self):
        assert budget_band_compatibility(None, BudgetRange(0, 100), 50) == 0
        assert budget_band_compatibility(BudgetRange(0, 100), BudgetRange(0, 100), None) == 0


class TestTravelStyle:

    @pytest.mark.parametrize("a, b, expected", [
        ("budget", "budget", 100),
        ("budget", "luxury", 20),
        ("luxury", "budget", 20),
        ("budget", "backpacker", 90),
        ("mid-range", "luxury", 80),
        ("luxury", "backpacker", 10),
    ])
    def test_matrix_values(self, a, b, expected):
        assert travel_style_compatibility(a, b) == expected

    def test_aliases_are_normalized(self):
        assert normalize_style("Backpacking") == "backpacker"
        assert normalize_style(" midrange ") == "mid-range"
        assert travel_style_compatibility("Mid_Range", "mid-range") == 100

    def test_unknown_pair_falls_back_to_50(self):
        assert travel_style_compatibility("budget", "glamping") == 50

    def test_identical_unknown_styles_score_100(self):
        assert travel_style_compatibility("glamping", "Glamping") == 100

    def test_missing_style_scores_zero(self):
        assert travel_style_compatibility(None, "budget") == 0
        assert travel_style_compatibility("budget", "  ") == 0


class TestRounding:

    @pytest.mark.parametrize("value, expected", [(0.5, 1), (2.5, 3), (49.49, 49), (99.5, 100), (0.0, 0)])
    def test_half_up(self, value, expected):
        assert round_half_up(value) == expected


# =============================================================================
# Trip-vs-trip variant
# =============================================================================

class TestTripPairScoring:

    def test_interest_similarity_uses_larger_set(self):
        own = make_proposal(interests=frozenset({"adventure", "food"}))
        other = make_proposal(interests=frozenset({"food", "culture"}))
        result = CompatibilityEngine().score_trips(own, other)
        assert result.factors[INTEREST_SIMILARITY] == 50

    def test_identical_trips_score_100(self):
        own = make_proposal()
        other = make_proposal()
        result = CompatibilityEngine().score_trips(own, other)
        assert result.score == 100
        assert set(result.factors) == set(TRIP_PAIR_WEIGHTS)

    def test_destination_containment(self):
        own = make_proposal(destination=Destination("Kyoto", "Japan"))
        same = make_proposal(destination=Destination("kyoto", "japan"))
        other = make_proposal(destination=Destination("Osaka", "Japan"))
        engine = CompatibilityEngine()
        assert engine.score_trips(own, same).factors[DESTINATION_MATCH] == 100
        assert engine.score_trips(own, other).factors[DESTINATION_MATCH] == 0

    def test_date_overlap_over_span(self):
        own = make_proposal(start=date(2026, 6, 1), end=date(2026, 6, 11))
        other = make_proposal(start=date(2026, 6, 6), end=date(2026, 6, 16))
        result = CompatibilityEngine().score_trips(own, other)
        assert result.factors[DATE_OVERLAP] == pytest.approx(5 / 15 * 100)

    def test_disjoint_dates(self):
        own = make_proposal(start=date(2026, 6, 1), end=date(2026, 6, 5))
        other = make_proposal(start=date(2026, 7, 1), end=date(2026, 7, 5))
        assert CompatibilityEngine().score_trips(own, other).factors[DATE_OVERLAP] == 0

    def test_budget_difference(self):
        engine = CompatibilityEngine()
        own = make_proposal(budget=1000.0)
        assert engine.score_trips(own, make_proposal(budget=1000.0)).factors[BUDGET_COMPATIBILITY] == 100
        assert engine.score_trips(own, make_proposal(budget=3000.0)).factors[BUDGET_COMPATIBILITY] == 0
        assert engine.score_trips(own, make_proposal(budget=None)).factors[BUDGET_COMPATIBILITY] == 0

    def test_missing_trip_raises(self):
        with pytest.raises(InvalidInput, match="other_trip"):
            CompatibilityEngine().score_trips(make_proposal(), None)


# =============================================================================
# Configuration
# =============================================================================

class TestConfiguration:

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError, match="sum to 1.0"):
            CompatibilityEngine(weights={DESTINATION_MATCH: 0.5, DATE_OVERLAP: 0.4})

    def test_unknown_factor_rejected(self):
        with pytest.raises(ValueError, match="Unknown"):
            CompatibilityEngine(weights={"vibes": 1.0})

    def test_language_not_available_for_trip_pairs(self):
        with pytest.raises(ValueError, match="Unknown"):
            CompatibilityEngine(trip_weights={LANGUAGE_MATCH: 1.0})

    def test_negative_weight_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            CompatibilityEngine(weights={DESTINATION_MATCH: 1.5, DATE_OVERLAP: -0.5})

    def test_reduced_factor_set(self):
        engine = CompatibilityEngine(weights={INTEREST_SIMILARITY: 1.0})
        requester = make_profile(interests=frozenset({"a", "b"}))
        recipient = make_profile(interests=frozenset({"b", "c"}))
        result = engine.score(requester, recipient, make_proposal())
        assert list(result.factors) == [INTEREST_SIMILARITY]
        assert result.score == 33

    def test_custom_style_matrix(self):
        matrix = {"budget": {"luxury": 60}}
        engine = CompatibilityEngine(style_matrix=matrix)
        requester = make_profile(travel_style="budget")
        recipient = make_profile(travel_style="luxury")
        result = engine.score(requester, recipient, make_proposal())
        assert result.factors[TRAVEL_STYLE_MATCH] == 60

    def test_engine_weights_are_read_only(self):
        engine = CompatibilityEngine()
        with pytest.raises(TypeError):
            engine.weights[DESTINATION_MATCH] = 1.0

    def test_default_engine_is_shared(self):
        assert default_engine() is default_engine()


# =============================================================================
# Ranking
# =============================================================================

class TestRankCandidates:

    @staticmethod
    def _score_from(scores):
        return lambda name: CompatibilityResult(score=scores[name], factors={})

    def test_sorted_best_first(self):
        scores = {"a": 40, "b": 90, "c": 65}
        ranked = rank_candidates(self._score_from(scores), ["a", "b", "c"])
        assert [r.candidate for r in ranked] == ["b", "c", "a"]

    def test_ties_keep_input_order(self):
        scores = {"a": 70, "b": 70, "c": 70}
        ranked = rank_candidates(self._score_from(scores), ["c", "a", "b"])
        assert [r.candidate for r in ranked] == ["c", "a", "b"]

    def test_min_score_and_limit(self):
        scores = {"a": 40, "b": 90, "c": 65, "d": 50}
        ranked = rank_candidates(self._score_from(scores), ["a", "b", "c", "d"], min_score=50, limit=2)
        assert [r.candidate for r in ranked] == ["b", "c"]

    def test_empty_pool(self):
        assert rank_candidates(self._score_from({}), []) == []
