"""
Request Schemas for the Route Matcher API.
"""

from pydantic import BaseModel, Field

from .route import SwipeAction


class SwipeRequest(BaseModel):
    """
    Request body for POST /swipes.

    Attributes:
        swiper_id: User making the decision
        swiped_id: User being decided on
        action: like or pass
    """
    swiper_id: str = Field(..., min_length=1, description="User making the decision")
    swiped_id: str = Field(..., min_length=1, description="User being decided on")
    action: SwipeAction = Field(..., description="Decision: like or pass")

    class Config:
        json_schema_extra = {
            "example": {
                "swiper_id": "user_ana",
                "swiped_id": "user_ben",
                "action": "like"
            }
        }
