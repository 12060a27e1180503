"""
Live sync status between two routes.

Summarises where two nomads stand relative to each other right now:

    same_stop  both are at an overlapping stop today
    syncing    an overlap window is in progress
    crossing   an overlap window starts in the future
    departed   no overlap, and the other route ended within the last 14 days
    none       nothing to report
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional

from .dates import parse_date
from .geo import haversine_distance
from .matcher import DISTANCE_THRESHOLD_KM, UNKNOWN_LOCATION
from ..schemas.route import RouteStop

logger = logging.getLogger(__name__)

DEPARTED_WINDOW_DAYS = 14

_ONE_DAY = timedelta(days=1)


class SyncStatus(str, Enum):
    SAME_STOP = "same_stop"
    SYNCING = "syncing"
    CROSSING = "crossing"
    DEPARTED = "departed"
    NONE = "none"


_PRIORITY = {
    SyncStatus.SAME_STOP: 3,
    SyncStatus.SYNCING: 2,
    SyncStatus.CROSSING: 1,
}


@dataclass
class SyncResult:
    status: SyncStatus = SyncStatus.NONE
    location: str = ""
    days_until: Optional[int] = None
    moving_to: Optional[str] = None


def _classify(start: datetime, end: datetime, now: datetime, today: datetime) -> Optional[SyncStatus]:
    if start <= today <= end:
        return SyncStatus.SAME_STOP
    if start <= now < end:
        return SyncStatus.SYNCING
    if start > now:
        return SyncStatus.CROSSING
    return None


def _departed(their_route: List[RouteStop], now: datetime, window_days: int) -> SyncResult:
    # Latest-departing stop among those already begun
    dated = []
    for stop in their_route:
        arrival = parse_date(stop.arrival_date)
        departure = parse_date(stop.departure_date)
        if arrival is not None and departure is not None and arrival <= now:
            dated.append((departure, stop))
    if not dated:
        return SyncResult()

    last_departure, last_stop = max(dated, key=lambda d: d[0])
    if last_departure >= now:
        return SyncResult()

    days_ago = math.floor((now - last_departure) / _ONE_DAY)
    if days_ago > window_days:
        return SyncResult()

    upcoming = []
    for stop in their_route:
        arrival = parse_date(stop.arrival_date)
        if arrival is not None and arrival > now:
            upcoming.append((arrival, stop))
    moving_to = None
    if upcoming:
        moving_to = min(upcoming, key=lambda u: u[0])[1].location.name

    return SyncResult(
        status=SyncStatus.DEPARTED,
        location=last_stop.location.name or UNKNOWN_LOCATION,
        days_until=days_ago,
        moving_to=moving_to,
    )


def compute_sync_status(
    my_route: Optional[List[RouteStop]],
    their_route: Optional[List[RouteStop]],
    now: Optional[datetime] = None,
    distance_threshold_km: float = DISTANCE_THRESHOLD_KM,
    departed_window_days: int = DEPARTED_WINDOW_DAYS
) -> SyncResult:
    """
    Compute the sync status of `their_route` as seen from `my_route`.

    The first stop pair reaching the highest priority wins. Pairs further
    apart than the distance threshold, with no shared days, or with
    unparseable dates are ignored.

    Args:
        my_route: Requester's stops
        their_route: Other user's stops
        now: Reference instant (defaults to the current UTC time)
        distance_threshold_km: Maximum distance for a pair to count
        departed_window_days: How far back a finished route still reports

    Returns:
        SyncResult for the pair of routes
    """
    if not my_route or not their_route:
        return SyncResult()

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    today = now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)

    best = SyncResult()
    best_priority = -1

    for my_stop in my_route:
        for their_stop in their_route:
            dist = haversine_distance(
                my_stop.location.latitude, my_stop.location.longitude,
                their_stop.location.latitude, their_stop.location.longitude
            )
            if dist > distance_threshold_km:
                continue

            bounds = [
                parse_date(my_stop.arrival_date), parse_date(my_stop.departure_date),
                parse_date(their_stop.arrival_date), parse_date(their_stop.departure_date),
            ]
            if any(b is None for b in bounds):
                continue
            my_arrival, my_departure, their_arrival, their_departure = bounds
            if not (my_arrival <= their_departure and their_arrival <= my_departure):
                continue

            start = max(my_arrival, their_arrival)
            end = min(my_departure, their_departure)
            status = _classify(start, end, now, today)
            if status is None or _PRIORITY[status] <= best_priority:
                continue

            best_priority = _PRIORITY[status]
            best = SyncResult(
                status=status,
                location=my_stop.location.name or their_stop.location.name or UNKNOWN_LOCATION,
                days_until=math.ceil((start - now) / _ONE_DAY) if status is SyncStatus.CROSSING else None,
            )

    if best_priority < 0:
        best = _departed(their_route, now, departed_window_days)

    logger.debug(f"Sync status: {best.status.value} at {best.location!r}")
    return best
