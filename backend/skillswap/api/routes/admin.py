"""
Admin console routes.
"""
from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from skillswap.core.config import settings
from skillswap.core.utils import build_pagination, format_response
from skillswap.db.session import get_db
from skillswap.models.user import User
from skillswap.models.swap import SwapStatus
from skillswap.schemas.admin import (
    AdminMessageCreate, AdminMessageCreatedResponse, AdminMessageListResponse, AdminMessageResponse,
    AdminMessageUpdate, PlatformStats,
)
from skillswap.schemas.common import MessageResponse
from skillswap.schemas.skill import OfferedSkillResponse, WantedSkillResponse
from skillswap.schemas.swap import AdminSwapListResponse, AdminSwapResponse
from skillswap.schemas.user import AdminUserListResponse, AdminUserResponse, BanUpdate, UserSummary
from skillswap.api.dependencies import get_current_admin
from skillswap.services import admin_service

router = APIRouter(prefix="/admin", tags=["admin"])


def _admin_user(user: User) -> AdminUserResponse:
    return AdminUserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        location=user.location,
        profile_photo=user.profile_photo,
        bio=user.bio,
        availability=user.availability,
        is_public=user.is_public,
        is_admin=user.is_admin,
        is_banned=user.is_banned,
        rating=user.rating,
        total_ratings=user.total_ratings,
        created_at=user.created_at,
        skills_offered=[OfferedSkillResponse.from_link(link) for link in user.offered_skills],
        skills_wanted=[WantedSkillResponse.from_link(link) for link in user.wanted_skills],
    )


# Users

@router.get("/users", response_model=AdminUserListResponse)
async def list_users(
    search: Optional[str] = None,
    status: Optional[str] = Query(None, pattern="^(active|banned)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """List users for moderation, filtered by name/email and ban status."""
    users, total = admin_service.list_users(db, search=search, status=status, page=page, limit=limit)
    return {
        "users": [_admin_user(u) for u in users],
        "pagination": build_pagination(page, limit, total),
    }


@router.put("/users/{user_id}/ban", response_model=MessageResponse)
async def ban_user(
    user_id: int,
    body: Optional[BanUpdate] = Body(None),
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Ban a user. A body of ``{"is_banned": false}`` lifts the ban instead."""
    banned = body.is_banned if body else True
    admin_service.set_ban(db, admin, user_id, banned)
    return format_response(f"User {'banned' if banned else 'unbanned'} successfully")


@router.put("/users/{user_id}/unban", response_model=MessageResponse)
async def unban_user(
    user_id: int,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Lift a user's ban."""
    admin_service.set_ban(db, admin, user_id, False)
    return format_response("User unbanned successfully")


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Delete a user and everything they own."""
    admin_service.delete_user(db, admin, user_id)
    return format_response("User deleted successfully")


# Swaps

@router.get("/swaps", response_model=AdminSwapListResponse)
async def list_swaps(
    status: Optional[SwapStatus] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=settings.MAX_PAGE_SIZE),
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """List swaps with party summaries."""
    swaps, total = admin_service.list_swaps(db, status=status, page=page, limit=limit)
    return {
        "swaps": [
            AdminSwapResponse.from_swap(
                s,
                requester=UserSummary.model_validate(s.requester),
                provider=UserSummary.model_validate(s.provider),
            )
            for s in swaps
        ],
        "pagination": build_pagination(page, limit, total),
    }


@router.delete("/swaps/{swap_id}", response_model=MessageResponse)
async def delete_swap(
    swap_id: int,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Delete a swap regardless of its state."""
    admin_service.delete_swap(db, admin, swap_id)
    return format_response("Swap deleted successfully")


@router.get("/stats", response_model=PlatformStats)
async def stats(
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Platform statistics for the dashboard."""
    return admin_service.compute_stats(db)


# Message board

@router.get("/messages/active", response_model=AdminMessageListResponse)
async def active_messages(db: Session = Depends(get_db)):
    """Active broadcast messages (public)."""
    return {"messages": admin_service.list_messages(db, active_only=True)}


@router.get("/messages", response_model=AdminMessageListResponse)
async def list_messages(
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """All broadcast messages, active or not."""
    return {"messages": admin_service.list_messages(db)}


@router.post("/messages", response_model=AdminMessageCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_message(
    body: AdminMessageCreate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Post a broadcast message."""
    entry = admin_service.create_message(db, body.title, body.message, body.type)
    return {"message": "Admin message created successfully", "message_id": entry.id}


@router.put("/messages/{message_id}", response_model=AdminMessageResponse)
async def update_message(
    message_id: int,
    body: AdminMessageUpdate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Edit a broadcast message."""
    return admin_service.update_message(db, message_id, body.model_dump(exclude_unset=True))


@router.delete("/messages/{message_id}", response_model=MessageResponse)
async def delete_message(
    message_id: int,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Delete a broadcast message."""
    admin_service.delete_message(db, message_id)
    return format_response("Message deleted successfully")
