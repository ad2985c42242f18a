import logging
from typing import Optional

from ghworld.analysis.profile.analytics import (
    activity_heatmap,
    hourly_distribution,
    language_breakdown,
    peak_hour,
    percentile_rank,
    streak_summary
)
from ghworld.analysis.stats.repo.repo import StatsRepository
from ghworld.data.cache.repo.repo import LocationCacheRepository
from ghworld.data.repo.repo import CommitRepository
from ghworld.utils.utils import DAY_MS, month_key, now_ms, utc_day

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 30
NO_RECENT_COMMITS = "No recent commits"


class ProfileAnalytics:
    def __init__(self, commit_repo: CommitRepository, stats_repo: StatsRepository,
                 location_repo: LocationCacheRepository, window_days: int = DEFAULT_WINDOW_DAYS):
        self.commit_repo = commit_repo
        self.stats_repo = stats_repo
        self.location_repo = location_repo
        self.window_days = window_days

    def get_profile_stats(self, username: str, window_start: int = None, now: int = None) -> Optional[dict]:
        """Profile card for one author; None for a blank username or no commits in the window"""
        username = (username or '').strip()
        if not username:
            return None

        now = now if now is not None else now_ms()
        start = window_start if window_start is not None else now - self.window_days * DAY_MS

        commits = [commit for commit in self.commit_repo.by_author(username, since=start)
                   if commit.timestamp <= now]
        if not commits:
            logger.debug(f"No commits for {username} since {start}")
            return None

        commits.sort(key=lambda commit: commit.timestamp, reverse=True)
        latest, first = commits[0], commits[-1]

        monthly = self.stats_repo.get_monthly(month_key(now))
        percentile = percentile_rank(
            len(commits),
            total_commits=monthly.total_commits if monthly else None,
            unique_contributors=monthly.unique_contributors if monthly else None
        )

        hourly = hourly_distribution(commits)
        location = self.location_repo.get(username)

        return {
            'author': username,
            'authorUrl': latest.author_url or f"https://github.com/{username}",
            'commitCount': len(commits),
            'percentileRank': percentile,
            'languageBreakdown': language_breakdown(commits),
            'location': {
                'text': location.location,
                'coordinates': location.coordinates,
            } if location else None,
            'latestCommitMessage': latest.message or NO_RECENT_COMMITS,
            'firstCommitTimestamp': first.timestamp,
            'startTime': start,
            'heatmap': activity_heatmap(commits),
            'hourlyDistribution': hourly,
            'peakHour': peak_hour(hourly),
            **streak_summary(commits, utc_day(now)),
        }
