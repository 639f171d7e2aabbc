"""
Tests for the Celery maintenance tasks.

Tasks are called directly (no broker). SyncSessionLocal is replaced with a
MagicMock session whose query chain returns the rows under test, and the
Nominatim client runs over httpx.MockTransport.
"""

from unittest.mock import MagicMock

import httpx
import pytest

from app.services.compatibility import default_engine
from app.services.geocoder import Geocoder
from app.services.match_service import trip_to_proposal, user_to_profile
from app.tasks import match_tasks, trip_tasks
from conftest import make_match, make_trip, make_user

BASE_URL = "https://nominatim.test/search"

KYOTO_HIT = {
    "lat": "35.0116",
    "lon": "135.7681",
    "display_name": "Kyoto, Kyoto Prefecture, Japan",
    "importance": 0.82,
    "address": {"country_code": "jp"},
}


@pytest.fixture
def session(monkeypatch):
    """Sync session stand-in shared by both task modules."""
    db = MagicMock()
    monkeypatch.setattr(match_tasks, "SyncSessionLocal", lambda: db)
    monkeypatch.setattr(trip_tasks, "SyncSessionLocal", lambda: db)
    return db


def use_nominatim(monkeypatch, handler):
    monkeypatch.setattr(
        trip_tasks,
        "Geocoder",
        lambda: Geocoder(rate_limit=0, base_url=BASE_URL, transport=httpx.MockTransport(handler)),
    )


# =============================================================================
# Match expiry
# =============================================================================

class TestExpireStaleMatches:

    def test_returns_expired_count(self, session):
        session.query.return_value.filter.return_value.update.return_value = 3

        assert match_tasks.expire_stale_matches() == {"expired": 3}

        session.query.return_value.filter.return_value.update.assert_called_once_with(
            {"is_active": False}, synchronize_session=False
        )
        session.commit.assert_called_once()
        session.close.assert_called_once()

    def test_error_rolls_back_and_reraises(self, session):
        session.query.side_effect = RuntimeError("connection lost")

        with pytest.raises(RuntimeError, match="connection lost"):
            match_tasks.expire_stale_matches()

        session.rollback.assert_called_once()
        session.commit.assert_not_called()
        session.close.assert_called_once()


# =============================================================================
# Rescoring
# =============================================================================

def pending_matches(session, matches):
    chain = session.query.return_value.options.return_value.filter.return_value
    chain.order_by.return_value.limit.return_value.all.return_value = matches


class TestRescorePendingMatches:

    def test_only_changed_scores_are_written(self, session):
        requester = make_user()
        recipient = make_user(interests=["food", "hiking"], languages=["English", "Japanese"])
        trip = make_trip()
        current = default_engine().score(
            user_to_profile(requester), user_to_profile(recipient), trip_to_proposal(trip)
        )

        unchanged = make_match(
            requester=requester, recipient=recipient, trip=trip,
            compatibility_score=current.score, match_factors={"stale": 1.0},
        )
        outdated = make_match(
            requester=requester, recipient=recipient, trip=trip,
            compatibility_score=(current.score + 10) % 101, match_factors={"stale": 1.0},
        )
        pending_matches(session, [unchanged, outdated])

        assert match_tasks.rescore_pending_matches() == {"processed": 2, "changed": 1}

        assert unchanged.match_factors == {"stale": 1.0}
        assert outdated.compatibility_score == current.score
        assert outdated.match_factors == dict(current.factors)
        session.commit.assert_called_once()
        session.close.assert_called_once()

    def test_batch_size_passed_to_query(self, session):
        pending_matches(session, [])

        assert match_tasks.rescore_pending_matches(batch_size=25) == {"processed": 0, "changed": 0}

        chain = session.query.return_value.options.return_value.filter.return_value.order_by.return_value
        chain.limit.assert_called_once_with(25)
        session.commit.assert_not_called()
        session.close.assert_called_once()

    def test_error_rolls_back_and_reraises(self, session):
        bad = make_match(requester=None, recipient=make_user(), trip=make_trip())
        pending_matches(session, [bad])

        with pytest.raises(AttributeError):
            match_tasks.rescore_pending_matches()

        session.rollback.assert_called_once()
        session.commit.assert_not_called()
        session.close.assert_called_once()


# =============================================================================
# Geocoding
# =============================================================================

def pending_trips(session, trips):
    session.query.return_value.filter.return_value.order_by.return_value.limit.return_value.all.return_value = trips


class TestGeocodePendingTrips:

    def test_same_destination_looked_up_once(self, session, monkeypatch):
        queries = []

        def handler(request: httpx.Request) -> httpx.Response:
            queries.append(request.url.params["q"])
            return httpx.Response(200, json=[KYOTO_HIT])

        use_nominatim(monkeypatch, handler)
        trips = [make_trip(), make_trip()]
        pending_trips(session, trips)

        assert trip_tasks.geocode_pending_trips() == {"processed": 2, "success": 2, "failed": 0}

        assert queries == ["Kyoto, Japan"]
        for trip in trips:
            assert trip.geocode_status == "success"
            assert trip.latitude == pytest.approx(35.0116)
            assert trip.longitude == pytest.approx(135.7681)
        session.commit.assert_called_once()

    def test_failed_lookup_marks_trip(self, session, monkeypatch):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params["q"].startswith("Kyoto"):
                return httpx.Response(200, json=[KYOTO_HIT])
            return httpx.Response(200, json=[])

        use_nominatim(monkeypatch, handler)
        found = make_trip()
        lost = make_trip(destination_city="Atlantis", destination_country="Ocean")
        pending_trips(session, [found, lost])

        assert trip_tasks.geocode_pending_trips() == {"processed": 2, "success": 1, "failed": 1}

        assert found.geocode_status == "success"
        assert lost.geocode_status == "failed"
        assert lost.latitude is None

    def test_http_error_marks_failed(self, session, monkeypatch):
        use_nominatim(monkeypatch, lambda request: httpx.Response(503))
        trip = make_trip()
        pending_trips(session, [trip])

        assert trip_tasks.geocode_pending_trips() == {"processed": 1, "success": 0, "failed": 1}
        assert trip.geocode_status == "failed"

    def test_nothing_pending(self, session, monkeypatch):
        handler = MagicMock()
        use_nominatim(monkeypatch, handler)
        pending_trips(session, [])

        assert trip_tasks.geocode_pending_trips() == {"processed": 0, "success": 0, "failed": 0}
        handler.assert_not_called()
        session.close.assert_called_once()

    def test_error_rolls_back_and_reraises(self, session, monkeypatch):
        use_nominatim(monkeypatch, lambda request: httpx.Response(200, json=[KYOTO_HIT]))
        pending_trips(session, [make_trip()])
        session.commit.side_effect = RuntimeError("commit failed")

        with pytest.raises(RuntimeError, match="commit failed"):
            trip_tasks.geocode_pending_trips()

        session.rollback.assert_called_once()
        session.close.assert_called_once()
