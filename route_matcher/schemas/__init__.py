"""
Pydantic Schemas Package for Route Matcher.

This package contains the stored user/route shapes and all request and
response models for the API.
"""

from .route import (
    SwipeAction,
    GeoPoint,
    RouteStop,
    UserProfile,
    SwipeRecord,
)
from .requests import SwipeRequest
from .responses import (
    DateRange,
    RouteOverlapResponse,
    MatchCandidateResponse,
    RouteMatchesResponse,
    SyncStatusResponse,
    SwipeResponse,
    SwipeResetResponse,
    HealthResponse,
    ErrorResponse,
)

__all__ = [
    # Stored shapes
    "SwipeAction",
    "GeoPoint",
    "RouteStop",
    "UserProfile",
    "SwipeRecord",
    # Requests
    "SwipeRequest",
    # Responses
    "DateRange",
    "RouteOverlapResponse",
    "MatchCandidateResponse",
    "RouteMatchesResponse",
    "SyncStatusResponse",
    "SwipeResponse",
    "SwipeResetResponse",
    "HealthResponse",
    "ErrorResponse",
]
