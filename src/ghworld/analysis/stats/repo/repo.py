from typing import List, Optional

from ghworld.analysis.stats.models.models import DailyStats, MonthlyStats
from ghworld.data.repo.repo import BaseRepository
from ghworld.utils.utils import now_ms


class StatsRepository(BaseRepository):
    def __init__(self, database_url: str = None):
        super().__init__(database_url)

    def get_monthly(self, month: str) -> Optional[MonthlyStats]:
        with self.session_scope() as session:
            return session.query(MonthlyStats).filter(MonthlyStats.month == month).first()

    def get_daily(self, date: str) -> Optional[DailyStats]:
        with self.session_scope() as session:
            return session.query(DailyStats).filter(DailyStats.date == date).first()

    def latest_daily(self, days: int = 7) -> List[DailyStats]:
        with self.session_scope() as session:
            return session.query(DailyStats).order_by(DailyStats.date.desc()).limit(days).all()

    def upsert_monthly(self, month: str, total_commits: int, unique_contributors: int,
                       by_language: dict, geolocation_rate: float) -> None:
        with self.session_scope() as session:
            existing = session.query(MonthlyStats).filter(MonthlyStats.month == month).first()

            if existing:
                existing.total_commits = total_commits
                existing.unique_contributors = unique_contributors
                existing.by_language = by_language
                existing.geolocation_rate = geolocation_rate
                existing.updated_at = now_ms()
            else:
                session.add(MonthlyStats(
                    month=month,
                    total_commits=total_commits,
                    unique_contributors=unique_contributors,
                    by_language=by_language,
                    geolocation_rate=geolocation_rate,
                    updated_at=now_ms()
                ))

    def upsert_daily(self, date: str, total_commits: int, unique_contributors: int,
                     by_language: dict) -> None:
        with self.session_scope() as session:
            existing = session.query(DailyStats).filter(DailyStats.date == date).first()

            if existing:
                existing.total_commits = total_commits
                existing.unique_contributors = unique_contributors
                existing.by_language = by_language
                existing.updated_at = now_ms()
            else:
                session.add(DailyStats(
                    date=date,
                    total_commits=total_commits,
                    unique_contributors=unique_contributors,
                    by_language=by_language,
                    updated_at=now_ms()
                ))
