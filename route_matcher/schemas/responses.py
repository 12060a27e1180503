"""
Response Schemas for the Route Matcher API.

This module defines Pydantic models for all API responses,
ensuring consistent output formatting and documentation.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any

from .route import UserProfile


class DateRange(BaseModel):
    """Inclusive calendar-date window."""
    start: str = Field(..., description="First shared day (YYYY-MM-DD)")
    end: str = Field(..., description="Last shared day (YYYY-MM-DD)")


class RouteOverlapResponse(BaseModel):
    """
    One qualifying stop pair between the requester and a candidate.

    Attributes:
        location_name: Requester's stop name, else candidate's, else "Unknown"
        date_range: Days both users are there
        distance_km: Rounded stop-to-stop distance
    """
    location_name: str
    date_range: DateRange
    distance_km: int = Field(..., ge=0)


class MatchCandidateResponse(BaseModel):
    """A ranked candidate with the overlaps that earned the score."""
    rank: int = Field(..., description="Rank (1 = best)")
    user: UserProfile
    overlaps: List[RouteOverlapResponse]
    score: float
    shared_interests: List[str] = Field(default_factory=list)


class RouteMatchesResponse(BaseModel):
    """
    Response model for GET /users/{user_id}/route-matches.

    Attributes:
        user_id: Requesting user
        count: Number of candidates returned
        matches: Candidates in score-descending order
    """
    user_id: str
    count: int
    matches: List[MatchCandidateResponse] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_ana",
                "count": 1,
                "matches": [
                    {
                        "rank": 1,
                        "user": {"user_id": "user_ben", "name": "Ben", "interests": ["surfing"]},
                        "overlaps": [
                            {
                                "location_name": "Lisbon",
                                "date_range": {"start": "2024-06-05", "end": "2024-06-10"},
                                "distance_km": 50
                            }
                        ],
                        "score": 19.67,
                        "shared_interests": ["surfing"]
                    }
                ]
            }
        }


class SyncStatusResponse(BaseModel):
    """Live sync status between two users' routes."""
    user_id: str
    other_user_id: str
    status: str = Field(..., description="same_stop, syncing, crossing, departed or none")
    location: str = ""
    days_until: Optional[int] = None
    moving_to: Optional[str] = None


class SwipeResponse(BaseModel):
    """Result of POST /swipes."""
    recorded: bool = Field(..., description="False when a decision already existed")


class SwipeResetResponse(BaseModel):
    """Result of DELETE /users/{user_id}/swipes."""
    user_id: str
    deleted: int


class HealthResponse(BaseModel):
    """
    Response model for health check endpoint.

    Attributes:
        status: Service health status
        version: API version
        components: Status of individual components
    """
    status: str = Field(default="healthy")
    version: str
    components: Dict[str, str] = Field(default_factory=dict)

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "version": "1.0.0",
                "components": {
                    "repository": "JSONRepository",
                    "data_version": "2024-06-01T10:00:00"
                }
            }
        }


class ErrorResponse(BaseModel):
    """
    Response model for error responses.

    Attributes:
        error: Error type
        message: Human-readable error message
        details: Additional error details
    """
    error: str
    message: str
    details: Optional[Dict[str, Any]] = None
