"""
Pure per-author computations over an already windowed set of commits.

Calendar days and hours are UTC. Nothing here touches the database.
"""
import math
from collections import Counter
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from ghworld.utils.utils import from_epoch_ms, utc_day

OTHER_LANGUAGE = "Other"

# (minimum commits, percentile) when no monthly average is available
FALLBACK_PERCENTILES = [
    (100, 1),
    (50, 5),
    (20, 10),
    (10, 25),
]
DEFAULT_PERCENTILE = 50


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percentile_rank(user_commit_count: int, total_commits: int = None,
                    unique_contributors: int = None) -> int:
    """
    Log-scale estimate against the monthly average commits per user:
    ratio 1 -> 50, every doubling of the ratio moves 25 points, clamped to
    [1, 99]. Without a usable monthly row, fixed commit-count thresholds.
    """
    if total_commits is not None and unique_contributors:
        avg_per_user = total_commits / unique_contributors
        if avg_per_user > 0:
            ratio = user_commit_count / avg_per_user
            if ratio <= 0:
                return 1
            return max(1, min(99, _round_half_up(50 + 25 * math.log2(ratio))))

    for threshold, percentile in FALLBACK_PERCENTILES:
        if user_commit_count >= threshold:
            return percentile
    return DEFAULT_PERCENTILE


def language_breakdown(commits: Sequence, top: int = 3) -> List[dict]:
    if not commits:
        return []

    counts = Counter(commit.language or OTHER_LANGUAGE for commit in commits)
    total = len(commits)
    breakdown = [
        {
            'language': language,
            'count': count,
            'percentage': _round_half_up(count / total * 100),
        }
        for language, count in counts.items()
    ]
    breakdown.sort(key=lambda item: (-item['count'], item['language']))
    return breakdown[:top]


def activity_heatmap(commits: Iterable) -> Dict[str, int]:
    """Sparse YYYY-MM-DD -> commit count, oldest day first"""
    counts = Counter(utc_day(commit.timestamp).isoformat() for commit in commits)
    return dict(sorted(counts.items()))


def hourly_distribution(commits: Iterable) -> List[dict]:
    counts = Counter(from_epoch_ms(commit.timestamp).hour for commit in commits)
    return [{'hour': hour, 'count': counts.get(hour, 0)} for hour in range(24)]


def peak_hour(distribution: List[dict]) -> Optional[int]:
    """Busiest hour, earliest on ties; None when there is no activity"""
    best = None
    for item in distribution:
        if item['count'] > 0 and (best is None or item['count'] > best['count']):
            best = item
    return best['hour'] if best else None


def current_streak(active_days: Iterable[date], today: date) -> int:
    days = set(active_days)
    if today in days:
        cursor = today
    elif today - timedelta(days=1) in days:
        cursor = today - timedelta(days=1)
    else:
        return 0

    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def longest_streak(active_days: Iterable[date]) -> int:
    days = sorted(set(active_days))
    if not days:
        return 0

    longest = run = 1
    for previous, current in zip(days, days[1:]):
        if (current - previous).days == 1:
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


def streak_summary(commits: Sequence, today: date) -> dict:
    days = {utc_day(commit.timestamp) for commit in commits}
    active = len(days)
    return {
        'currentStreak': current_streak(days, today),
        'longestStreak': longest_streak(days),
        'activeDays': active,
        'avgCommitsPerDay': round(len(commits) / active, 1) if active else 0,
    }
