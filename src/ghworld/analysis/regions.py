"""
Coarse region buckets for located commits.

Plain lat/lng rectangles checked in order, first match wins, so overlapping
edges (Mediterranean, Middle East, Central America) resolve to whichever
region is listed first. Eastern Russia sits outside the Asia rectangle and is
folded into Asia by a second, disjoint rule.
"""
from collections import Counter
from typing import Dict, Iterable

UNKNOWN_REGION = "unknown"
OTHER_REGION = "other"

# (region, min_lat, max_lat, min_lng, max_lng)
REGION_BOUNDS = [
    ("north_america", 15.0, 72.0, -170.0, -50.0),
    ("south_america", -56.0, 15.0, -92.0, -30.0),
    ("europe", 35.0, 72.0, -25.0, 45.0),
    ("africa", -35.0, 37.0, -20.0, 52.0),
    ("asia", -10.0, 78.0, 45.0, 150.0),
    ("oceania", -50.0, 0.0, 110.0, 180.0),
    # eastern Russia, both sides of the dateline
    ("asia", 50.0, 78.0, 150.0, 180.0),
    ("asia", 50.0, 78.0, -180.0, -169.0),
]

REGIONS = ["north_america", "south_america", "europe", "africa", "asia", "oceania"]


def classify_region(lat, lng) -> str:
    if lat is None or lng is None:
        return UNKNOWN_REGION

    for region, min_lat, max_lat, min_lng, max_lng in REGION_BOUNDS:
        if min_lat <= lat <= max_lat and min_lng <= lng <= max_lng:
            return region
    return OTHER_REGION


def regional_distribution(commits: Iterable) -> Dict[str, int]:
    counts = Counter()
    for commit in commits:
        coordinates = commit.coordinates
        if len(coordinates) == 2:
            counts[classify_region(coordinates[0], coordinates[1])] += 1
        else:
            counts[UNKNOWN_REGION] += 1
    return dict(counts)
