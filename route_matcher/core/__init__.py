"""
Core module for the Route Matcher.

Contains the matching logic for:
- Haversine Distance (stop proximity)
- Inclusive date-range intersection
- Overlap detection, scoring and ranking
- Live sync status between two routes
"""

from .geo import haversine_distance, pairwise_haversine
from .dates import dates_overlap, overlap_window, parse_date
from .matcher import (
    RouteMatcher,
    RouteOverlap,
    MatchCandidate,
    find_overlaps,
    get_matcher,
)
from .sync import SyncResult, SyncStatus, compute_sync_status

__all__ = [
    "haversine_distance",
    "pairwise_haversine",
    "dates_overlap",
    "overlap_window",
    "parse_date",
    "RouteMatcher",
    "RouteOverlap",
    "MatchCandidate",
    "find_overlaps",
    "get_matcher",
    "SyncResult",
    "SyncStatus",
    "compute_sync_status",
]
