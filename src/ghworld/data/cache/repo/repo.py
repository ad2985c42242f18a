from typing import List, Optional

from ghworld.data.cache.models.models import LocationCacheEntry, RepoLanguageCacheEntry
from ghworld.data.repo.repo import BaseRepository
from ghworld.utils.utils import now_ms


class LocationCacheRepository(BaseRepository):
    """username -> geocoded coordinates, one row per username (last writer wins)"""

    def __init__(self, database_url: str = None):
        super().__init__(database_url)

    def get(self, username: str) -> Optional[LocationCacheEntry]:
        with self.session_scope() as session:
            return session.query(LocationCacheEntry).filter(
                LocationCacheEntry.username == username
            ).first()

    def upsert(self, username: str, location: str, coordinates: List[float]) -> None:
        if len(coordinates) != 2:
            raise ValueError(f"Location cache needs [lat, lng], got {coordinates!r}")

        with self.session_scope() as session:
            existing = session.query(LocationCacheEntry).filter(
                LocationCacheEntry.username == username
            ).first()

            if existing:
                existing.location = location
                existing.latitude = coordinates[0]
                existing.longitude = coordinates[1]
                existing.cached_at = now_ms()
            else:
                session.add(LocationCacheEntry(
                    username=username,
                    location=location,
                    latitude=coordinates[0],
                    longitude=coordinates[1],
                    cached_at=now_ms()
                ))

    def all_entries(self, limit: int = 100000) -> List[LocationCacheEntry]:
        with self.session_scope() as session:
            return session.query(LocationCacheEntry).order_by(LocationCacheEntry.id).limit(limit).all()


class RepoLanguageCacheRepository(BaseRepository):
    """owner/name -> primary language (None is a cached answer too)"""

    def __init__(self, database_url: str = None):
        super().__init__(database_url)

    def get(self, repository: str) -> Optional[RepoLanguageCacheEntry]:
        with self.session_scope() as session:
            return session.query(RepoLanguageCacheEntry).filter(
                RepoLanguageCacheEntry.repository == repository
            ).first()

    def upsert(self, repository: str, language: Optional[str]) -> None:
        with self.session_scope() as session:
            existing = session.query(RepoLanguageCacheEntry).filter(
                RepoLanguageCacheEntry.repository == repository
            ).first()

            if existing:
                existing.language = language
                existing.cached_at = now_ms()
            else:
                session.add(RepoLanguageCacheEntry(
                    repository=repository,
                    language=language,
                    cached_at=now_ms()
                ))
