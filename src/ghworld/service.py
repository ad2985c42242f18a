"""Wiring of the pipeline and the query surface handed to the presentation layer."""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from ghworld.analysis.profile.profiles import ProfileAnalytics
from ghworld.analysis.regions import regional_distribution
from ghworld.analysis.stats.aggregator import StatsAggregator
from ghworld.analysis.stats.repo.repo import StatsRepository
from ghworld.config import Settings
from ghworld.data.cache.repo.repo import LocationCacheRepository, RepoLanguageCacheRepository
from ghworld.data.enrichment import LanguageResolver, LocationResolver
from ghworld.data.geo.geocoder import GeoLocationService
from ghworld.data.github.github_client import GitHubClient
from ghworld.data.poller import EventPoller, PollResult
from ghworld.data.repo.repo import CommitRepository
from ghworld.query.search import search_authors, search_locations
from ghworld.query.spatial import BoundingBox, SpatialTemporalQueryEngine
from ghworld.storage.unit_of_work import UnitOfWork
from ghworld.utils.utils import month_key, now_ms

logger = logging.getLogger(__name__)

MINUTE_MS = 60 * 1000


class GlobeService:
    def __init__(self, settings: Settings, uow: UnitOfWork = None,
                 client: GitHubClient = None, geocoder: GeoLocationService = None):
        self.settings = settings
        self.uow = uow or UnitOfWork(settings.database_url)
        self.uow.create_all()

        self.commit_repo = CommitRepository(settings.database_url)
        self.location_repo = LocationCacheRepository(settings.database_url)
        self.language_repo = RepoLanguageCacheRepository(settings.database_url)
        self.stats_repo = StatsRepository(settings.database_url)
        for repo in (self.commit_repo, self.location_repo, self.language_repo, self.stats_repo):
            repo.uow = self.uow

        self.client = client or GitHubClient(
            token=settings.token,
            user_agent=settings.user_agent,
            timeout=settings.request_timeout
        )
        self.geocoder = geocoder or GeoLocationService(
            user_agent=settings.user_agent,
            timeout=settings.geocode_timeout,
            min_delay_seconds=settings.geocode_min_delay
        )

        self.poller = EventPoller(
            self.client,
            self.commit_repo,
            LocationResolver(self.client, self.geocoder, self.location_repo,
                             refresh_after_days=settings.location_refresh_days),
            LanguageResolver(self.client, self.language_repo),
            per_page=settings.events_per_page,
            enrichment_floor=settings.enrichment_floor
        )
        self.engine = SpatialTemporalQueryEngine(
            self.commit_repo,
            self.location_repo,
            live_window_minutes=settings.live_window_minutes,
            result_limit=settings.result_limit,
            scan_limit=settings.scan_limit
        )
        self.aggregator = StatsAggregator(self.commit_repo, self.stats_repo)
        self.profiles = ProfileAnalytics(self.commit_repo, self.stats_repo, self.location_repo)

    # jobs

    def poll(self) -> PollResult:
        return self.poller.poll()

    def evict(self, now: int = None) -> int:
        now = now if now is not None else now_ms()
        cutoff = now - self.settings.retention_minutes * MINUTE_MS
        return self.commit_repo.evict_older_than(
            cutoff,
            batch_size=self.settings.eviction_batch_size,
            max_batches=self.settings.eviction_max_batches
        )

    def update_monthly_stats(self):
        return self.aggregator.update_monthly_stats()

    def update_daily_stats(self, date: str = None):
        return self.aggregator.update_daily_stats(date)

    # query surface

    def get_live_commits(self, box: dict = None) -> List[dict]:
        try:
            bounds = BoundingBox.from_dict(box)
        except ValueError as e:
            logger.warning(f"Live query rejected: {e}")
            return []
        return [commit.to_dict() for commit in self.engine.live_commits(bounds)]

    def get_windowed_commits(self, start: int, end: int, box: dict = None) -> List[dict]:
        try:
            bounds = BoundingBox.from_dict(box)
        except ValueError as e:
            logger.warning(f"Windowed query rejected: {e}")
            return []
        commits = self.engine.windowed_commits(start, end, bounds)
        return [commit.to_dict() for commit in commits]

    def get_count(self, start: int = None, end: int = None) -> int:
        return self.engine.count(start, end)

    def get_oldest_timestamp(self) -> int:
        return self.engine.oldest_timestamp()

    def get_profile_stats(self, username: str, window_start: int = None) -> Optional[dict]:
        return self.profiles.get_profile_stats(username, window_start)

    def search_authors(self, prefix: str, limit: int = 10) -> List[dict]:
        return search_authors(self.commit_repo, prefix, limit)

    def search_locations(self, text: str, limit: int = 10) -> List[dict]:
        return search_locations(self.location_repo, text, limit)

    def get_authors_in_region(self, box: dict, limit: int = 50) -> List[str]:
        try:
            bounds = BoundingBox.from_dict(box)
        except ValueError as e:
            logger.warning(f"Region query rejected: {e}")
            return []
        return self.engine.authors_in_region(bounds, limit)

    def get_regional_distribution(self, start: int = None, end: int = None) -> dict:
        return regional_distribution(self.engine.windowed_commits(start, end))

    def get_monthly_stats(self, month: str) -> Optional[dict]:
        stats = self.stats_repo.get_monthly(month)
        return stats.to_dict() if stats else None

    def get_current_month_stats(self) -> Optional[dict]:
        return self.get_monthly_stats(month_key(datetime.now(timezone.utc)))

    def get_historical_stats(self, days: int = 7) -> List[dict]:
        return [stats.to_dict() for stats in self.stats_repo.latest_daily(days)]

    def close(self):
        self.uow.dispose()
