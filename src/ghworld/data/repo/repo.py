import logging
from contextlib import contextmanager
from typing import List, Optional

import pandas as pd
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from ghworld.storage.models.models import Commit
from ghworld.storage.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

ORDER_ASC = 'asc'
ORDER_DESC = 'desc'


class BaseRepository:
    def __init__(self, database_url: str = None):
        self.database_url = database_url
        self._uow = None

    @property
    def uow(self):
        if self._uow is None:
            self._uow = UnitOfWork(self.database_url)
        return self._uow

    @uow.setter
    def uow(self, value):
        self._uow = value

    @contextmanager
    def session_scope(self):
        session = self.uow.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


def _time_range(query, start=None, end=None):
    if start is not None:
        query = query.filter(Commit.timestamp >= start)
    if end is not None:
        query = query.filter(Commit.timestamp < end)
    return query


class CommitRepository(BaseRepository):
    """Retained commits. The only writer of the commit lifecycle."""

    def __init__(self, database_url: str = None):
        super().__init__(database_url)

    def exists(self, commit_id: str) -> bool:
        with self.session_scope() as session:
            return session.query(Commit.id).filter(Commit.id == commit_id).first() is not None

    def insert_if_absent(self, commit_data: dict) -> bool:
        coordinates = commit_data.get('coordinates') or []
        if len(coordinates) not in (0, 2):
            raise ValueError(f"Coordinates must be empty or [lat, lng], got {coordinates!r}")

        try:
            with self.session_scope() as session:
                existing = session.query(Commit.id).filter(Commit.id == commit_data['id']).first()
                if existing:
                    return False

                session.add(Commit(
                    id=commit_data['id'],
                    author=commit_data['author'],
                    author_url=commit_data.get('author_url') or f"https://github.com/{commit_data['author']}",
                    message=commit_data.get('message', ''),
                    repository=commit_data['repository'],
                    timestamp=int(commit_data['timestamp']),
                    latitude=coordinates[0] if coordinates else None,
                    longitude=coordinates[1] if coordinates else None,
                    language=commit_data.get('language')
                ))
            return True
        except IntegrityError:
            # concurrent insert of the same id won the race
            logger.debug(f"Commit {commit_data['id']} inserted concurrently, skipping")
            return False

    def insert_many(self, commits: List[dict]) -> List[str]:
        """Insert each commit if absent; returns the ids that were actually stored"""
        stored = []
        for commit_data in commits:
            if self.insert_if_absent(commit_data):
                stored.append(commit_data['id'])
        return stored

    def range_by_time(self, start: int = None, end: int = None, order: str = ORDER_DESC,
                      limit: int = None) -> List[Commit]:
        """start <= timestamp < end; either bound may be None"""
        with self.session_scope() as session:
            query = _time_range(session.query(Commit), start, end)
            if order == ORDER_ASC:
                query = query.order_by(Commit.timestamp.asc())
            else:
                query = query.order_by(Commit.timestamp.desc())
            if limit is not None:
                query = query.limit(limit)
            return query.all()

    def count_range(self, start: int = None, end: int = None) -> int:
        with self.session_scope() as session:
            query = _time_range(session.query(func.count(Commit.id)), start, end)
            return int(query.scalar() or 0)

    def by_author(self, author: str, since: int = None) -> List[Commit]:
        with self.session_scope() as session:
            query = session.query(Commit).filter(Commit.author == author)
            if since is not None:
                query = query.filter(Commit.timestamp >= since)
            return query.all()

    def oldest_timestamp(self) -> Optional[int]:
        with self.session_scope() as session:
            return session.query(func.min(Commit.timestamp)).scalar()

    def author_counts_by_prefix(self, prefix: str, scan_limit: int = 50000, limit: int = 10):
        """(author, commit_count) for authors starting with prefix among the most recent commits"""
        escaped = prefix.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
        with self.session_scope() as session:
            recent = (
                session.query(Commit.author.label('author'))
                .order_by(Commit.timestamp.desc())
                .limit(scan_limit)
                .subquery()
            )
            commit_count = func.count().label('commit_count')
            rows = (
                session.query(recent.c.author, commit_count)
                .filter(func.lower(recent.c.author).like(f"{escaped}%", escape='\\'))
                .group_by(recent.c.author)
                .order_by(commit_count.desc(), recent.c.author.asc())
                .limit(limit)
                .all()
            )
            return [(row[0], int(row[1])) for row in rows]

    def load_period_frame(self, start: int, end: int) -> pd.DataFrame:
        """author / language / latitude / longitude for start <= timestamp < end"""
        with self.session_scope() as session:
            query = _time_range(
                session.query(Commit.author, Commit.language, Commit.latitude, Commit.longitude),
                start, end
            )
            return pd.read_sql(query.statement, session.connection())

    def evict_older_than(self, cutoff: int, batch_size: int = 500, max_batches: int = None) -> int:
        """Delete commits with timestamp < cutoff, batch_size rows per transaction"""
        deleted = 0
        batches = 0

        while max_batches is None or batches < max_batches:
            with self.session_scope() as session:
                ids = [
                    row[0] for row in
                    session.query(Commit.id)
                    .filter(Commit.timestamp < cutoff)
                    .order_by(Commit.timestamp.asc())
                    .limit(batch_size)
                    .all()
                ]
                if not ids:
                    break

                session.query(Commit).filter(Commit.id.in_(ids)).delete(synchronize_session=False)

            deleted += len(ids)
            batches += 1
            if len(ids) < batch_size:
                break

        if deleted:
            logger.info(f"Evicted {deleted} commits older than {cutoff}")
        return deleted
