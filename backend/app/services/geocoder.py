"""Destination geocoding using Nominatim (OpenStreetMap)."""

import logging
import time
from dataclasses import dataclass
from typing import Optional

import httpx

from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

USER_AGENT = "TravioAPI/1.0 (trip destination lookup)"


@dataclass
class GeoResult:
    """Result from geocoding operation."""

    latitude: float
    longitude: float
    display_name: str
    confidence: float  # 0-1 based on importance
    country_code: str | None = None


def build_destination_query(city: str, country: str, region: str | None = None) -> str:
    """Free-text query such as 'Kyoto, Kansai, Japan'."""
    return ", ".join(part.strip() for part in (city, region, country) if part and part.strip())


def parse_nominatim_response(results: list[dict]) -> Optional[GeoResult]:
    """Turn the first Nominatim hit into a GeoResult.

    Raises KeyError/ValueError on a malformed hit; callers log and skip.
    """
    if not results:
        return None

    result = results[0]
    address = result.get("address", {})
    country_code = address.get("country_code")
    return GeoResult(
        latitude=float(result["lat"]),
        longitude=float(result["lon"]),
        display_name=result.get("display_name", ""),
        confidence=min(float(result.get("importance", 0.5)), 1.0),
        country_code=country_code.upper() if country_code else None,
    )


class Geocoder:
    """
    Rate-limited geocoder using Nominatim API.

    Nominatim requires:
    - Max 1 request per second
    - User-Agent header identifying the application
    """

    def __init__(
        self,
        rate_limit: float | None = None,
        base_url: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize geocoder.

        Args:
            rate_limit: Minimum seconds between requests (default from settings)
            base_url: Search endpoint (default from settings)
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests
        """
        self.rate_limit = settings.nominatim_rate_limit if rate_limit is None else rate_limit
        self.last_request_time = 0.0
        self.base_url = base_url or settings.nominatim_url
        self.transport = transport

    def _params(self, query: str) -> dict:
        return {
            "q": query,
            "format": "json",
            "limit": 1,
            "addressdetails": 1,
        }

    def _wait_for_rate_limit(self) -> None:
        """Block until rate limit allows next request."""
        elapsed = time.time() - self.last_request_time
        if elapsed < self.rate_limit:
            time.sleep(self.rate_limit - elapsed)
        self.last_request_time = time.time()

    def geocode_destination_sync(
        self, city: str, country: str, region: str | None = None
    ) -> Optional[GeoResult]:
        """
        Geocode a trip destination synchronously.

        Returns:
            GeoResult if found, None otherwise (including HTTP and parse errors)
        """
        query = build_destination_query(city, country, region)
        if not query:
            return None

        self._wait_for_rate_limit()

        try:
            with httpx.Client(timeout=30, transport=self.transport) as client:
                response = client.get(
                    self.base_url,
                    params=self._params(query),
                    headers={"User-Agent": USER_AGENT},
                )
                response.raise_for_status()
                result = parse_nominatim_response(response.json())

        except httpx.HTTPError as e:
            logger.error(f"Geocoding HTTP error for '{query}': {e}")
            return None
        except (KeyError, ValueError) as e:
            logger.error(f"Geocoding parse error for '{query}': {e}")
            return None

        if result is None:
            logger.debug(f"No geocoding results for: {query}")
        return result

