"""
Pydantic schemas for the admin console: statistics and broadcast messages.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from skillswap.models.admin_message import MessageType
from skillswap.schemas.skill import PopularSkill


class UserStats(BaseModel):
    total_users: int
    banned_users: int
    new_users_30d: int


class SwapStats(BaseModel):
    total_swaps: int
    pending_swaps: int
    accepted_swaps: int
    rejected_swaps: int
    cancelled_swaps: int
    completed_swaps: int
    new_swaps_30d: int


class RatingStats(BaseModel):
    avg_rating: Optional[float] = None  # None until the first rating exists
    total_ratings: int


class PlatformStats(BaseModel):
    """Aggregate counters for the admin dashboard."""
    users: UserStats
    swaps: SwapStats
    popular_skills: List[PopularSkill]
    ratings: RatingStats


class AdminMessageCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    type: MessageType = MessageType.INFO


class AdminMessageUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    message: Optional[str] = Field(None, min_length=1)
    type: Optional[MessageType] = None
    is_active: Optional[bool] = None


class AdminMessageResponse(BaseModel):
    id: int
    title: str
    message: str
    type: MessageType
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class AdminMessageCreatedResponse(BaseModel):
    message: str
    message_id: int


class AdminMessageListResponse(BaseModel):
    messages: List[AdminMessageResponse]
