"""
Swap routes: proposal, lifecycle transitions and rating.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
from skillswap.core.utils import format_response
from skillswap.db.session import get_db
from skillswap.models.user import User
from skillswap.models.swap import SwapStatus
from skillswap.schemas.common import MessageResponse
from skillswap.schemas.swap import (
    RatingCreate, RatingResponse, SwapCreate, SwapCreatedResponse, SwapDetailResponse,
    SwapEnvelope, SwapListResponse, SwapResponse,
)
from skillswap.api.dependencies import get_current_user
from skillswap.services import swap_service

router = APIRouter(prefix="/swaps", tags=["swaps"])


@router.post("", response_model=SwapCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_swap(
    swap_data: SwapCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Propose a swap to another user."""
    swap = swap_service.create_swap(
        db,
        requester=current_user,
        provider_id=swap_data.provider_id,
        offered_skill_ids=swap_data.offered_skill_ids,
        requested_skill_ids=swap_data.requested_skill_ids,
        message=swap_data.message,
    )
    return {"message": "Swap request created successfully", "swap_id": swap.id}


@router.get("/my-swaps", response_model=SwapListResponse)
async def my_swaps(
    status: Optional[SwapStatus] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Swaps the current user requested or was asked for."""
    swaps = swap_service.list_user_swaps(db, current_user, status=status)
    return {"swaps": [SwapResponse.from_swap(s) for s in swaps]}


@router.put("/{swap_id}/accept", response_model=MessageResponse)
async def accept_swap(
    swap_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Accept a pending swap (provider only)."""
    swap_service.accept_swap(db, swap_id, current_user)
    return format_response("Swap request accepted successfully")


@router.put("/{swap_id}/reject", response_model=MessageResponse)
async def reject_swap(
    swap_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Reject a pending swap (provider only)."""
    swap_service.reject_swap(db, swap_id, current_user)
    return format_response("Swap request rejected successfully")


@router.put("/{swap_id}/cancel", response_model=MessageResponse)
async def cancel_swap(
    swap_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Cancel a pending swap (requester only)."""
    swap_service.cancel_swap(db, swap_id, current_user)
    return format_response("Swap request cancelled successfully")


@router.put("/{swap_id}/complete", response_model=MessageResponse)
async def complete_swap(
    swap_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Mark an accepted swap as completed (either party)."""
    swap_service.complete_swap(db, swap_id, current_user)
    return format_response("Swap completed successfully")


@router.post("/{swap_id}/rate", response_model=MessageResponse)
async def rate_swap(
    swap_id: int,
    rating_data: RatingCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Rate the other party of a completed swap."""
    swap_service.rate_swap(db, swap_id, current_user, rating_data.rating, rating_data.comment)
    return format_response("Rating submitted successfully")


@router.get("/{swap_id}", response_model=SwapEnvelope)
async def get_swap(
    swap_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Swap details, for its parties."""
    swap = swap_service.get_swap(db, swap_id, current_user)
    ratings = [RatingResponse.model_validate(r) for r in swap.ratings]
    return {"swap": SwapDetailResponse.from_swap(swap, ratings=ratings)}
