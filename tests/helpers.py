"""
Builders for users, stops and points shared across test modules.
"""

import math

from route_matcher.schemas.route import GeoPoint, RouteStop, UserProfile

# Kilometers per degree of latitude along a meridian (R = 6371 km)
KM_PER_DEG_LAT = math.pi * 6371.0 / 180.0

LISBON = (38.72, -9.14)


def north_of(point, km):
    """Point `km` kilometers due north of `point` (exact along a meridian)."""
    return point[0] + km / KM_PER_DEG_LAT, point[1]


def make_stop(point, arrival, departure, name=None):
    return RouteStop(
        location=GeoPoint(latitude=point[0], longitude=point[1], name=name),
        arrival_date=arrival,
        departure_date=departure,
    )


def make_user(user_id, stops=None, interests=None):
    return UserProfile(
        user_id=user_id,
        name=user_id.title(),
        interests=interests or [],
        current_route=stops,
    )
