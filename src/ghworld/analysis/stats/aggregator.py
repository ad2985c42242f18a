import logging
from datetime import datetime, timezone
from typing import Any, Dict

import pandas as pd

from ghworld.analysis.stats.repo.repo import StatsRepository
from ghworld.data.repo.repo import CommitRepository
from ghworld.utils.utils import day_bounds_ms, day_key, month_bounds_ms, month_key

logger = logging.getLogger(__name__)

OTHER_LANGUAGE = "Other"


def summarize_frame(df: pd.DataFrame) -> Dict[str, Any]:
    """Totals, distinct authors, language histogram and geolocation rate of a commit frame"""
    total_commits = int(len(df))
    if total_commits == 0:
        return {
            'total_commits': 0,
            'unique_contributors': 0,
            'by_language': {},
            'geolocation_rate': 0.0,
        }

    languages = df['language'].fillna(OTHER_LANGUAGE).replace('', OTHER_LANGUAGE)
    by_language = {str(lang): int(count) for lang, count in languages.value_counts().items()}
    located = int((df['latitude'].notna() & df['longitude'].notna()).sum())

    return {
        'total_commits': total_commits,
        'unique_contributors': int(df['author'].nunique()),
        'by_language': by_language,
        'geolocation_rate': located / total_commits,
    }


class StatsAggregator:
    """Full recompute of the current month / day rollups; safe to run any number of times."""

    def __init__(self, commit_repo: CommitRepository, stats_repo: StatsRepository):
        self.commit_repo = commit_repo
        self.stats_repo = stats_repo

    def update_monthly_stats(self, now: datetime = None) -> Dict[str, Any]:
        now = now or datetime.now(timezone.utc)
        month = month_key(now)
        start, end = month_bounds_ms(now)

        summary = summarize_frame(self.commit_repo.load_period_frame(start, end))
        self.stats_repo.upsert_monthly(
            month,
            total_commits=summary['total_commits'],
            unique_contributors=summary['unique_contributors'],
            by_language=summary['by_language'],
            geolocation_rate=summary['geolocation_rate']
        )

        logger.info(f"Stats updated for {month}: {summary['total_commits']} commits, "
                    f"{summary['unique_contributors']} contributors")
        return {'month': month, **summary}

    def update_daily_stats(self, date: str = None, now: datetime = None) -> Dict[str, Any]:
        date = date or day_key(now or datetime.now(timezone.utc))
        start, end = day_bounds_ms(date)

        summary = summarize_frame(self.commit_repo.load_period_frame(start, end))
        self.stats_repo.upsert_daily(
            date,
            total_commits=summary['total_commits'],
            unique_contributors=summary['unique_contributors'],
            by_language=summary['by_language']
        )

        logger.info(f"Daily stats updated for {date}: {summary['total_commits']} commits")
        summary.pop('geolocation_rate')
        return {'date': date, **summary}
