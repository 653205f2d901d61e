"""
User directory routes and the caller's skill lists.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from skillswap.core.config import settings
from skillswap.core.utils import build_pagination, format_response
from skillswap.db.session import get_db
from skillswap.models.user import User
from skillswap.schemas.common import MessageResponse
from skillswap.schemas.skill import (
    MySkillsResponse, OfferedSkillCreate, OfferedSkillResponse, WantedSkillCreate, WantedSkillResponse,
)
from skillswap.schemas.user import PublicUserDetail, PublicUserEnvelope, PublicUserListResponse, PublicUserResponse
from skillswap.api.dependencies import get_current_user
from skillswap.services import skill_service, user_service

router = APIRouter(prefix="/users", tags=["users"])


def _public_user(user: User, cls=PublicUserResponse, **extra):
    return cls(
        id=user.id,
        name=user.name,
        location=user.location,
        profile_photo=user.profile_photo,
        bio=user.bio,
        availability=user.availability,
        rating=user.rating,
        total_ratings=user.total_ratings,
        created_at=user.created_at,
        skills_offered=[OfferedSkillResponse.from_link(link) for link in user.offered_skills],
        skills_wanted=[WantedSkillResponse.from_link(link) for link in user.wanted_skills],
        **extra,
    )


@router.get("", response_model=PublicUserListResponse)
async def list_users(
    search: Optional[str] = None,
    skill: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db)
):
    """List public users, optionally filtered by name/location or skill."""
    users, total = user_service.list_public_users(db, search=search, skill=skill, page=page, limit=limit)
    return {
        "users": [_public_user(u) for u in users],
        "pagination": build_pagination(page, limit, total),
    }


@router.get("/me/skills", response_model=MySkillsResponse)
async def my_skills(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get the current user's offered and wanted skills."""
    offered, wanted = skill_service.get_user_skills(db, current_user.id)
    return MySkillsResponse(
        skills_offered=[OfferedSkillResponse.from_link(link) for link in offered],
        skills_wanted=[WantedSkillResponse.from_link(link) for link in wanted],
    )


@router.post("/me/skills/offered", response_model=OfferedSkillResponse)
async def add_offered_skill(
    body: OfferedSkillCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add a skill to the offered list, or update its level and note."""
    link = skill_service.upsert_offered_skill(
        db, current_user, body.skill_id,
        experience_level=body.experience_level,
        description=body.description,
    )
    return OfferedSkillResponse.from_link(link)


@router.post("/me/skills/wanted", response_model=WantedSkillResponse)
async def add_wanted_skill(
    body: WantedSkillCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add a skill to the wanted list, or update its priority and note."""
    link = skill_service.upsert_wanted_skill(
        db, current_user, body.skill_id,
        priority=body.priority,
        description=body.description,
    )
    return WantedSkillResponse.from_link(link)


@router.delete("/me/skills/offered/{skill_id}", response_model=MessageResponse)
async def remove_offered_skill(
    skill_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Remove a skill from the offered list."""
    skill_service.remove_offered_skill(db, current_user, skill_id)
    return format_response("Skill removed successfully")


@router.delete("/me/skills/wanted/{skill_id}", response_model=MessageResponse)
async def remove_wanted_skill(
    skill_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Remove a skill from the wanted list."""
    skill_service.remove_wanted_skill(db, current_user, skill_id)
    return format_response("Wanted skill removed successfully")


@router.get("/{user_id}", response_model=PublicUserEnvelope)
async def get_user(user_id: int, db: Session = Depends(get_db)):
    """Public profile. Private and banned users are reported as not found."""
    user = user_service.get_public_user(db, user_id)
    recent = user_service.recent_ratings(db, user.id)
    return {"user": _public_user(user, cls=PublicUserDetail, recent_ratings=recent)}
