"""Google Geocoding lookups."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

import requests

from enrich_articles.models import Coordinates

logger = logging.getLogger(__name__)

GOOGLE_GEOCODE_ENDPOINT = "https://maps.googleapis.com/maps/api/geocode/json"


class GoogleGeocoder:
    def __init__(self, api_key: str, endpoint: str = GOOGLE_GEOCODE_ENDPOINT, timeout: int = 30) -> None:
        self.api_key = api_key
        self.endpoint = endpoint
        self.timeout = timeout

    def geocode(self, location: str) -> Optional[Coordinates]:
        """
        Resolve a free-text location to the first result's coordinates.

        Returns None when the request fails, the service answers with a
        non-2xx status, or there are no results.
        """
        try:
            response = requests.get(
                self.endpoint,
                params={"address": location, "key": self.api_key},
                timeout=self.timeout,
            )
            if not 200 <= response.status_code < 300:
                logger.warning(
                    "Failed to get coordinates for location '%s': %s %s",
                    location,
                    response.status_code,
                    response.reason,
                )
                return None

            # Decimal keeps the digits exactly as sent for later rounding
            payload = response.json(parse_float=Decimal)
            results = payload.get("results") or []
            if not results:
                logger.info("No results found for location '%s'.", location)
                return None

            point = results[0]["geometry"]["location"]
            return Coordinates(lat=point["lat"], lng=point["lng"])
        except Exception as e:
            logger.warning("Exception while getting coordinates for location '%s': %s", location, e)
            return None
