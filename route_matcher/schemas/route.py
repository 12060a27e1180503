"""
Pydantic Schemas for users, routes and swipes.

These are the stored shapes read from the user repository:
- Geographic points and planned stops
- User profiles with interests and current route
- Swipe decisions
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime, timezone
from enum import Enum


class SwipeAction(str, Enum):
    """Decision a user makes about another user's card."""
    LIKE = "like"
    PASS = "pass"


class GeoPoint(BaseModel):
    """
    Geographic coordinates with an optional place name.

    Ranges are not enforced; out-of-range values give meaningless distances.
    """
    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")
    name: Optional[str] = Field(
        default=None,
        description="Human-readable place name"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "latitude": 38.7223,
                "longitude": -9.1393,
                "name": "Lisbon"
            }
        }


class RouteStop(BaseModel):
    """
    A single planned location visit.

    Dates are kept as strings. Malformed values are tolerated here and
    skipped during matching.
    """
    location: GeoPoint
    arrival_date: str = Field(..., description="Arrival date (ISO date or timestamp)")
    departure_date: str = Field(..., description="Departure date (ISO date or timestamp)")
    notes: Optional[str] = None
    role: Optional[str] = None
    intent: Optional[str] = None
    destination_type: Optional[str] = None
    status: Optional[str] = None


class UserProfile(BaseModel):
    """
    A nomad as consumed by route matching.

    Attributes:
        user_id: Stable identifier
        name: Display name
        interests: Interest tags
        current_route: Planned stops, absent when no route was entered
    """
    user_id: str
    name: str = ""
    interests: List[str] = Field(default_factory=list)
    current_route: Optional[List[RouteStop]] = None

    # Profile attributes shown alongside a match
    bio: Optional[str] = None
    gender: Optional[str] = None
    looking_for: List[str] = Field(default_factory=list)
    van_type: Optional[str] = None
    van_build_status: Optional[str] = None
    van_verified: bool = False
    travel_styles: List[str] = Field(default_factory=list)

    @property
    def has_route(self) -> bool:
        return bool(self.current_route)

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_ana",
                "name": "Ana",
                "interests": ["surfing", "climbing"],
                "current_route": [
                    {
                        "location": {"latitude": 38.7223, "longitude": -9.1393, "name": "Lisbon"},
                        "arrival_date": "2024-06-01",
                        "departure_date": "2024-06-10"
                    }
                ]
            }
        }


class SwipeRecord(BaseModel):
    """A recorded like/pass decision by one user about another."""
    swiper_id: str
    swiped_id: str
    action: SwipeAction
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
