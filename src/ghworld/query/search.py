from typing import List

from ghworld.data.cache.repo.repo import LocationCacheRepository
from ghworld.data.repo.repo import CommitRepository
from ghworld.utils.utils import safe_lower

MIN_SEARCH_LENGTH = 2
AUTHOR_SCAN_LIMIT = 50000


def search_authors(commit_repo: CommitRepository, prefix: str, limit: int = 10) -> List[dict]:
    """Recently active authors whose handle starts with prefix, busiest first"""
    prefix = safe_lower(prefix).strip()
    if len(prefix) < MIN_SEARCH_LENGTH:
        return []

    rows = commit_repo.author_counts_by_prefix(prefix, scan_limit=AUTHOR_SCAN_LIMIT, limit=limit)
    return [{'author': author, 'commitCount': count} for author, count in rows]


def search_locations(location_repo: LocationCacheRepository, text: str, limit: int = 10) -> List[dict]:
    """Cached location texts containing text, grouped, most users first"""
    query = safe_lower(text).strip()
    if len(query) < MIN_SEARCH_LENGTH:
        return []

    groups = {}
    for entry in location_repo.all_entries():
        if query not in entry.location.lower():
            continue
        group = groups.get(entry.location)
        if group:
            group['userCount'] += 1
        else:
            groups[entry.location] = {
                'location': entry.location,
                'coordinates': entry.coordinates,
                'userCount': 1,
            }

    ranked = sorted(groups.values(), key=lambda group: (-group['userCount'], group['location']))
    return ranked[:limit]
