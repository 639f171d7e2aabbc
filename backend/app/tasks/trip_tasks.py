"""Trip data tasks — destination geocoding."""

import logging

from app.tasks.celery_app import celery_app
from app.config import get_settings
from app.models.base import SyncSessionLocal
from app.models.match import Match  # noqa: F401
from app.models.trip import Trip
from app.models.trip_join_request import TripJoinRequest  # noqa: F401
from app.models.trip_swipe import TripSwipe, TripPairing  # noqa: F401
from app.models.user import User  # noqa: F401
from app.services.geocoder import Geocoder

logger = logging.getLogger(__name__)
settings = get_settings()


@celery_app.task(name="app.tasks.trip_tasks.geocode_pending_trips")
def geocode_pending_trips(batch_size: int | None = None):
    """Geocode trip destinations that don't have coordinates yet."""
    batch_size = batch_size or settings.geocode_batch_size
    db = SyncSessionLocal()
    geocoder = Geocoder()

    try:
        trips = db.query(Trip).filter(
            Trip.geocode_status == "pending",
        ).order_by(Trip.created_at.asc()).limit(batch_size).all()

        if not trips:
            logger.info("No trips need geocoding")
            return {"processed": 0, "success": 0, "failed": 0}

        # Trips sharing a destination only hit Nominatim once
        cache = {}
        success = 0
        failed = 0

        for trip in trips:
            key = (trip.destination_city, trip.destination_region, trip.destination_country)
            if key not in cache:
                cache[key] = geocoder.geocode_destination_sync(
                    city=trip.destination_city,
                    country=trip.destination_country,
                    region=trip.destination_region,
                )
            result = cache[key]

            if result:
                trip.latitude = result.latitude
                trip.longitude = result.longitude
                trip.geocode_status = "success"
                success += 1
            else:
                trip.geocode_status = "failed"
                failed += 1

        db.commit()
        logger.info(f"Geocoded {success} trips, {failed} failed")
        return {"processed": success + failed, "success": success, "failed": failed}

    except Exception:
        db.rollback()
        logger.exception("Trip geocoding batch failed")
        raise
    finally:
        db.close()
