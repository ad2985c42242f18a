import logging
from typing import List, Optional

import cachetools

from ghworld.data.cache.repo.repo import LocationCacheRepository, RepoLanguageCacheRepository
from ghworld.data.geo.geocoder import GeoLocationService
from ghworld.data.github.github_client import GitHubClient
from ghworld.utils.utils import DAY_MS, now_ms

logger = logging.getLogger(__name__)


class LocationResolver:
    """
    Actor -> [lat, lng] or [].

    Cache first; on a miss (or an entry older than refresh_after_ms) read the
    profile location and geocode it, writing successes through to the cache.
    Users without a usable location are remembered in-process for an hour so
    overlapping poll windows do not spend budget on them again. Failed
    lookups are not remembered and are retried on the next commit.
    """

    def __init__(self, client: GitHubClient, geocoder: GeoLocationService,
                 cache_repo: LocationCacheRepository, refresh_after_days: int = 30,
                 miss_ttl_seconds: int = 3600):
        self.client = client
        self.geocoder = geocoder
        self.cache_repo = cache_repo
        self.refresh_after_ms = refresh_after_days * DAY_MS
        self._unlocatable = cachetools.TTLCache(maxsize=10000, ttl=miss_ttl_seconds)

    def resolve(self, username: str) -> List[float]:
        cached = self.cache_repo.get(username)
        if cached and now_ms() - cached.cached_at < self.refresh_after_ms:
            return cached.coordinates

        stale = cached.coordinates if cached else []
        if username in self._unlocatable:
            return stale

        location = self.client.get_user_location(username)
        if location is None:
            logger.debug(f"Profile lookup failed for {username}")
            return stale
        if not location:
            logger.debug(f"No profile location for {username}")
            self._unlocatable[username] = True
            return stale

        coordinates = self.geocoder.geocode_location(location)
        if coordinates is None:
            logger.debug(f"Geocoding failed for '{location}', retrying {username} later")
            return stale
        if not coordinates:
            logger.debug(f"Could not geocode '{location}' for {username}")
            self._unlocatable[username] = True
            return stale

        self.cache_repo.upsert(username, location, coordinates)
        return coordinates


class LanguageResolver:
    """owner/name -> primary language, cached including 'no language' answers."""

    def __init__(self, client: GitHubClient, cache_repo: RepoLanguageCacheRepository):
        self.client = client
        self.cache_repo = cache_repo

    def resolve(self, repository: str) -> Optional[str]:
        cached = self.cache_repo.get(repository)
        if cached:
            return cached.language

        repo_info = self.client.get_repository(repository)
        if repo_info is None:
            # lookup failed, try again on a later cycle
            return None

        language = repo_info.get('language')
        self.cache_repo.upsert(repository, language)
        return language
