"""
Spatial/temporal reads over the commit store.

Every read is a time-range scan capped at scan_limit followed by an
in-process bounding-box filter that stops at result_limit. Results are a
snapshot of whatever the store held at scan time.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ghworld.data.cache.repo.repo import LocationCacheRepository
from ghworld.data.repo.repo import ORDER_DESC, CommitRepository
from ghworld.utils.utils import DAY_MS, now_ms

logger = logging.getLogger(__name__)

MINUTE_MS = 60 * 1000


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    @classmethod
    def from_dict(cls, data: Optional[dict]):
        """None for no box; ValueError when a bound is missing or not a number"""
        if not data:
            return None
        try:
            return cls(
                min_lat=float(data['minLat']),
                max_lat=float(data['maxLat']),
                min_lng=float(data['minLng']),
                max_lng=float(data['maxLng'])
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed bounding box {data!r}: {e}") from e

    @property
    def crosses_dateline(self) -> bool:
        return self.min_lng > self.max_lng

    def contains(self, lat: float, lng: float) -> bool:
        if lat < self.min_lat or lat > self.max_lat:
            return False

        if not self.crosses_dateline:
            return self.min_lng <= lng <= self.max_lng
        # two arcs: [min_lng, 180] and [-180, max_lng]
        return not (lng < self.min_lng and lng > self.max_lng)


def filter_commits(commits: Iterable, box: Optional[BoundingBox], limit: int) -> List:
    """
    Unlocated commits pass only when there is no box; located ones must fall
    inside it. Stops as soon as limit results are collected.
    """
    results = []
    for commit in commits:
        if len(results) >= limit:
            break

        coordinates = commit.coordinates
        if len(coordinates) != 2:
            if box is None:
                results.append(commit)
            continue

        if box is not None and not box.contains(coordinates[0], coordinates[1]):
            continue

        results.append(commit)
    return results


class SpatialTemporalQueryEngine:
    def __init__(self, commit_repo: CommitRepository, location_repo: LocationCacheRepository = None,
                 live_window_minutes: int = 5, result_limit: int = 5000, scan_limit: int = 20000):
        self.commit_repo = commit_repo
        self.location_repo = location_repo
        self.live_window_ms = live_window_minutes * MINUTE_MS
        self.result_limit = result_limit
        self.scan_limit = scan_limit

    def live_commits(self, box: Optional[BoundingBox] = None, now: int = None, limit: int = None):
        """Commits with timestamp > now - live window"""
        now = now if now is not None else now_ms()
        # integer millis: timestamp > t  <=>  timestamp >= t + 1
        start = now - self.live_window_ms + 1
        return self._scan(start, None, box, limit)

    def windowed_commits(self, start: int, end: int, box: Optional[BoundingBox] = None, limit: int = None):
        """Commits with start <= timestamp < end"""
        if start is not None and end is not None and start >= end:
            return []
        return self._scan(start, end, box, limit)

    def count(self, start: int = None, end: int = None) -> int:
        """Exact count over the time range, no spatial step and no result cap"""
        return self.commit_repo.count_range(start, end)

    def oldest_timestamp(self, now: int = None) -> int:
        oldest = self.commit_repo.oldest_timestamp()
        if oldest is None:
            now = now if now is not None else now_ms()
            return now - DAY_MS
        return int(oldest)

    def authors_in_region(self, box: BoundingBox, limit: int = 50) -> List[str]:
        if box is None or self.location_repo is None:
            return []

        usernames = []
        for entry in self.location_repo.all_entries():
            if len(usernames) >= limit:
                break
            if box.contains(entry.latitude, entry.longitude):
                usernames.append(entry.username)
        return usernames

    def _scan(self, start, end, box, limit):
        limit = min(limit or self.result_limit, self.result_limit)
        candidates = self.commit_repo.range_by_time(
            start=start, end=end, order=ORDER_DESC, limit=self.scan_limit
        )
        results = filter_commits(candidates, box, limit)
        logger.debug(f"Scanned {len(candidates)} commits, returning {len(results)}")
        return results
