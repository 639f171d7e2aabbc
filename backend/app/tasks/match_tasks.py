"""Match maintenance tasks — request expiry and score refresh."""

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import selectinload

from app.tasks.celery_app import celery_app
from app.config import get_settings
from app.models.base import SyncSessionLocal
from app.models.match import Match
from app.models.trip import Trip  # noqa: F401
from app.models.trip_join_request import TripJoinRequest  # noqa: F401
from app.models.trip_swipe import TripSwipe, TripPairing  # noqa: F401
from app.models.user import User  # noqa: F401
from app.services.compatibility import default_engine
from app.services.match_service import trip_to_proposal, user_to_profile

logger = logging.getLogger(__name__)
settings = get_settings()


@celery_app.task(name="app.tasks.match_tasks.expire_stale_matches")
def expire_stale_matches():
    """Mark pending match requests past their expiry as inactive."""
    db = SyncSessionLocal()
    try:
        now = datetime.now(timezone.utc)
        result = db.query(Match).filter(
            Match.status == "pending",
            Match.is_active == True,  # noqa: E712
            Match.expires_at <= now,
        ).update({"is_active": False}, synchronize_session=False)
        db.commit()
        logger.info(f"Expired {result} stale match requests")
        return {"expired": result}
    except Exception:
        db.rollback()
        logger.exception("Expiring stale matches failed")
        raise
    finally:
        db.close()


@celery_app.task(name="app.tasks.match_tasks.rescore_pending_matches")
def rescore_pending_matches(batch_size: int | None = None):
    """
    Recompute compatibility for pending requests.

    Profiles and trips change after a request is sent; the stored score
    should reflect what the recipient would see today.
    """
    batch_size = batch_size or settings.rescore_batch_size
    engine = default_engine()
    db = SyncSessionLocal()

    try:
        matches = db.query(Match).options(
            selectinload(Match.requester),
            selectinload(Match.recipient),
            selectinload(Match.trip),
        ).filter(
            Match.status == "pending",
            Match.is_active == True,  # noqa: E712
        ).order_by(Match.created_at.asc()).limit(batch_size).all()

        if not matches:
            logger.info("No pending matches to rescore")
            return {"processed": 0, "changed": 0}

        changed = 0
        for match in matches:
            result = engine.score(
                user_to_profile(match.requester),
                user_to_profile(match.recipient),
                trip_to_proposal(match.trip),
            )
            if result.score != match.compatibility_score:
                match.compatibility_score = result.score
                match.match_factors = dict(result.factors)
                changed += 1

        db.commit()
        logger.info(f"Rescored {len(matches)} pending matches, {changed} changed")
        return {"processed": len(matches), "changed": changed}

    except Exception:
        db.rollback()
        logger.exception("Rescoring pending matches failed")
        raise
    finally:
        db.close()
