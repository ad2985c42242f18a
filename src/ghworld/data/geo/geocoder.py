import logging
from typing import List, Optional

import cachetools
from geopy.exc import GeocoderServiceError, GeocoderTimedOut, GeopyError
from geopy.extra.rate_limiter import RateLimiter
from geopy.geocoders import Nominatim

logger = logging.getLogger(__name__)

PLACEHOLDER_LOCATIONS = {'', 'unknown', 'none', 'null', 'n/a'}


class GeoLocationService:
    """
    Free-text location -> [lat, lng] via Nominatim, first result only.

    [] means the text has no match and is cached; None means the lookup
    failed and is not.
    """

    def __init__(self, user_agent: str = "ghworld-app", timeout: int = 10,
                 min_delay_seconds: float = 1.0, cache_size: int = 1000, geolocator=None):
        self.geolocator = geolocator or Nominatim(user_agent=user_agent, timeout=timeout)
        self.timeout = timeout
        # Nominatim usage policy: at most one request per second
        self._geocode = RateLimiter(
            self.geolocator.geocode,
            min_delay_seconds=min_delay_seconds,
            max_retries=0,
            swallow_exceptions=False
        )
        self.cache = cachetools.LRUCache(maxsize=cache_size)

    def geocode_location(self, location_str: str) -> Optional[List[float]]:
        if not location_str or location_str.lower().strip() in PLACEHOLDER_LOCATIONS:
            return []

        cache_key = location_str.lower().strip()
        if cache_key in self.cache:
            return self.cache[cache_key]

        try:
            location = self._geocode(location_str, exactly_one=True, timeout=self.timeout)
        except (GeocoderTimedOut, GeocoderServiceError) as e:
            logger.warning(f"Geocoding error for '{location_str}': {e}")
            return None
        except GeopyError as e:
            logger.warning(f"Unexpected geocoding error for '{location_str}': {e}")
            return None

        if not location:
            self.cache[cache_key] = []
            return []

        coordinates = [float(location.latitude), float(location.longitude)]
        self.cache[cache_key] = coordinates
        return coordinates
