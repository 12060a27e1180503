"""
Route-Overlap Matching Engine.

Given a user's planned stops, find other nomads whose stops are both
close in space and intersecting in time, score them, and rank them.

Pipeline:
    1. Load requester (no user or no route -> no matches)
    2. Load candidate pool and requester's swipe history
    3. Drop self, route-less users and already-swiped users
    4. Detect overlaps over every (my stop, their stop) pair
    5. Score, sort descending, truncate

Scoring:
    per overlap: 10 + max(0, 10 - distance_km / 15)
    total:       sum(per overlap) + 3 * |shared interests|
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set

import numpy as np

from .dates import overlap_window
from .geo import pairwise_haversine
from ..schemas.route import RouteStop, UserProfile

logger = logging.getLogger(__name__)

DISTANCE_THRESHOLD_KM = 150.0
MAX_RESULTS = 20

OVERLAP_BASE_SCORE = 10.0
PROXIMITY_BONUS_MAX = 10.0
PROXIMITY_DECAY_KM = 15.0
SHARED_INTEREST_WEIGHT = 3.0

UNKNOWN_LOCATION = "Unknown"


@dataclass
class RouteOverlap:
    """
    A qualifying stop pair between two routes.

    Attributes:
        location_name: Requester's stop name, else candidate's, else "Unknown"
        start: First shared day (YYYY-MM-DD)
        end: Last shared day (YYYY-MM-DD)
        distance_km: Stop-to-stop distance rounded to whole kilometers
    """
    location_name: str
    start: str
    end: str
    distance_km: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "location_name": self.location_name,
            "date_range": {"start": self.start, "end": self.end},
            "distance_km": self.distance_km,
        }


@dataclass
class MatchCandidate:
    """A candidate user with their overlaps, score and shared interests."""
    user: UserProfile
    overlaps: List[RouteOverlap] = field(default_factory=list)
    score: float = 0.0
    shared_interests: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user": self.user.model_dump(),
            "overlaps": [o.to_dict() for o in self.overlaps],
            "score": round(self.score, 4),
            "shared_interests": self.shared_interests,
        }


def _round_km(distance: float) -> int:
    # Half-up rounding
    return int(math.floor(distance + 0.5))


def _location_label(my_stop: RouteStop, their_stop: RouteStop) -> str:
    return my_stop.location.name or their_stop.location.name or UNKNOWN_LOCATION


def find_overlaps(
    my_route: List[RouteStop],
    their_route: List[RouteStop],
    distance_threshold_km: float = DISTANCE_THRESHOLD_KM
) -> List[RouteOverlap]:
    """
    Find every stop pair that is within range and shares at least one day.

    Compares the full cartesian product of both routes. Pairs with
    unparseable dates never qualify.

    Args:
        my_route: Requester's stops
        their_route: Candidate's stops
        distance_threshold_km: Maximum distance for a pair to qualify

    Returns:
        Overlaps in requester-stop then candidate-stop order
    """
    if not my_route or not their_route:
        return []

    distances = pairwise_haversine(
        np.array([s.location.latitude for s in my_route]),
        np.array([s.location.longitude for s in my_route]),
        np.array([s.location.latitude for s in their_route]),
        np.array([s.location.longitude for s in their_route]),
    )

    overlaps = []
    for i, my_stop in enumerate(my_route):
        for j, their_stop in enumerate(their_route):
            dist = float(distances[i, j])
            if dist > distance_threshold_km:
                continue

            window = overlap_window(
                my_stop.arrival_date, my_stop.departure_date,
                their_stop.arrival_date, their_stop.departure_date
            )
            if window is None:
                continue

            overlaps.append(RouteOverlap(
                location_name=_location_label(my_stop, their_stop),
                start=window[0],
                end=window[1],
                distance_km=_round_km(dist),
            ))

    return overlaps


def shared_interests(mine: Iterable[str], theirs: Iterable[str]) -> List[str]:
    """Interests both users list, de-duplicated, in the requester's order."""
    their_set = set(theirs)
    shared = []
    for tag in mine:
        if tag in their_set and tag not in shared:
            shared.append(tag)
    return shared


def overlap_score(overlap: RouteOverlap) -> float:
    """Base reward plus a proximity bonus that decays to 0 at 150 km."""
    proximity = max(0.0, PROXIMITY_BONUS_MAX - overlap.distance_km / PROXIMITY_DECAY_KM)
    return OVERLAP_BASE_SCORE + proximity


def score_candidate(overlaps: List[RouteOverlap], shared: List[str]) -> float:
    """Total score: sum of overlap contributions plus 3 per shared interest."""
    return sum(overlap_score(o) for o in overlaps) + SHARED_INTEREST_WEIGHT * len(shared)


def filter_candidates(
    requester_id: str,
    users: Iterable[UserProfile],
    swiped_ids: Set[str]
) -> List[UserProfile]:
    """Drop the requester, users without a route and already-swiped users."""
    return [
        u for u in users
        if u.user_id != requester_id
        and u.has_route
        and u.user_id not in swiped_ids
    ]


def rank_candidates(candidates: List[MatchCandidate], limit: int = MAX_RESULTS) -> List[MatchCandidate]:
    """Sort by score descending (ties by user_id) and keep the top `limit`."""
    ordered = sorted(candidates, key=lambda c: (-c.score, c.user.user_id))
    return ordered[:limit]


class RouteMatcher:
    """
    Route-overlap matcher over a user repository.

    Attributes:
        repository: Source of users and swipe history
        distance_threshold_km: Maximum stop-to-stop distance for an overlap
        max_results: Number of candidates returned

    Example:
        >>> matcher = RouteMatcher(repository)
        >>> matches = matcher.find_route_matches("user_ana")
    """

    def __init__(
        self,
        repository,
        distance_threshold_km: float = DISTANCE_THRESHOLD_KM,
        max_results: int = MAX_RESULTS
    ):
        self.repository = repository
        self.distance_threshold_km = distance_threshold_km
        self.max_results = max_results

    def match_user(self, requester: UserProfile, candidate: UserProfile) -> Optional[MatchCandidate]:
        """Score one candidate against the requester, or None without overlaps."""
        overlaps = find_overlaps(
            requester.current_route or [],
            candidate.current_route or [],
            self.distance_threshold_km,
        )
        if not overlaps:
            return None

        shared = shared_interests(requester.interests, candidate.interests)
        return MatchCandidate(
            user=candidate,
            overlaps=overlaps,
            score=score_candidate(overlaps, shared),
            shared_interests=shared,
        )

    def find_route_matches(self, user_id: str) -> List[MatchCandidate]:
        """
        Rank other users by how well their routes overlap the requester's.

        Unknown users and users without a route get an empty list.
        Repository failures propagate unchanged.

        Args:
            user_id: Requesting user

        Returns:
            Up to `max_results` candidates in score-descending order
        """
        requester = self.repository.get_user(user_id)
        if requester is None or not requester.has_route:
            logger.info(f"No route matches for {user_id}: user missing or has no route")
            return []

        users = self.repository.list_users()
        swiped_ids = {s.swiped_id for s in self.repository.get_swipes(user_id)}

        pool = filter_candidates(user_id, users, swiped_ids)

        results = []
        for candidate in pool:
            match = self.match_user(requester, candidate)
            if match is not None:
                results.append(match)

        ranked = rank_candidates(results, self.max_results)

        logger.info(
            f"Route matches for {user_id}: {len(ranked)} returned from "
            f"{len(results)} overlapping of {len(pool)} candidates"
        )
        return ranked


# Singleton instance
_matcher: Optional[RouteMatcher] = None


def get_matcher() -> RouteMatcher:
    """Get or create the RouteMatcher singleton."""
    global _matcher
    if _matcher is None:
        from ..config import settings
        from ..repository import create_repository

        repository = create_repository(
            use_mongo=settings.USE_MONGO,
            data_path=settings.USERS_DATA_PATH,
            mongo_uri=settings.MONGODB_URI,
            db_name=settings.MONGODB_DB_NAME,
        )
        _matcher = RouteMatcher(
            repository,
            distance_threshold_km=settings.DISTANCE_THRESHOLD_KM,
            max_results=settings.MAX_RESULTS,
        )
    return _matcher
