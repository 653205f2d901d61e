"""
Pydantic schemas for Swap and Rating entities.
"""
from pydantic import AliasChoices, BaseModel, Field
from typing import List, Optional
from datetime import datetime
from skillswap.models.swap import Swap, SwapStatus
from skillswap.schemas.common import Pagination
from skillswap.schemas.skill import SkillSummary
from skillswap.schemas.user import UserSummary


class SwapCreate(BaseModel):
    """Schema for a swap request."""
    provider_id: int
    offered_skill_ids: List[int] = Field(..., min_length=1)
    requested_skill_ids: List[int] = Field(..., min_length=1)
    message: Optional[str] = None


class SwapCreatedResponse(BaseModel):
    message: str
    swap_id: int


class RatingCreate(BaseModel):
    """Schema for rating a completed swap."""
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


class RatingResponse(BaseModel):
    """A rating left on a swap."""
    id: int
    swap_id: int
    rater_id: int
    rated_id: int
    rating: int = Field(validation_alias=AliasChoices("score", "rating"))
    comment: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class SwapResponse(BaseModel):
    """Schema for swap response."""
    id: int
    requester_id: int
    provider_id: int
    requester_name: str
    provider_name: str
    status: SwapStatus
    message: Optional[str] = None
    skills_offered: List[SkillSummary] = []
    skills_wanted: List[SkillSummary] = []
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_swap(cls, swap: Swap, **extra) -> "SwapResponse":
        return cls(
            id=swap.id,
            requester_id=swap.requester_id,
            provider_id=swap.provider_id,
            requester_name=swap.requester.name,
            provider_name=swap.provider.name,
            status=swap.status,
            message=swap.message,
            skills_offered=[SkillSummary.model_validate(s) for s in swap.offered_skills],
            skills_wanted=[SkillSummary.model_validate(s) for s in swap.requested_skills],
            created_at=swap.created_at,
            updated_at=swap.updated_at,
            **extra,
        )


class SwapDetailResponse(SwapResponse):
    """Swap with the ratings both parties left."""
    ratings: List[RatingResponse] = []


class AdminSwapResponse(SwapResponse):
    """Swap with party summaries, for moderation."""
    requester: UserSummary
    provider: UserSummary


class SwapListResponse(BaseModel):
    swaps: List[SwapResponse]


class SwapEnvelope(BaseModel):
    swap: SwapDetailResponse


class AdminSwapListResponse(BaseModel):
    swaps: List[AdminSwapResponse]
    pagination: Pagination
