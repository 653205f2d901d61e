"""
Skill catalog routes.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from skillswap.core.config import settings
from skillswap.core.utils import build_pagination, format_response
from skillswap.db.session import get_db
from skillswap.models.user import User
from skillswap.schemas.common import MessageResponse
from skillswap.schemas.skill import (
    CategoriesResponse, PopularSkillsResponse, SkillCreate, SkillEnvelope, SkillListResponse, SkillUpdate,
)
from skillswap.api.dependencies import get_current_admin
from skillswap.services import skill_service

router = APIRouter(prefix="/skills", tags=["skills"])


@router.get("", response_model=SkillListResponse)
async def list_skills(
    search: Optional[str] = None,
    category: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db)
):
    """List catalog entries."""
    skills, total = skill_service.list_skills(db, search=search, category=category, page=page, limit=limit)
    return {"skills": skills, "pagination": build_pagination(page, limit, total)}


@router.get("/categories", response_model=CategoriesResponse)
async def list_categories(db: Session = Depends(get_db)):
    """Distinct skill categories, sorted."""
    return {"categories": skill_service.list_categories(db)}


@router.get("/popular/list", response_model=PopularSkillsResponse)
async def popular_skills(db: Session = Depends(get_db)):
    """Top ten skills by number of users offering or wanting them."""
    return {"skills": skill_service.popular_skills(db)}


@router.get("/{skill_id}", response_model=SkillEnvelope)
async def get_skill(skill_id: int, db: Session = Depends(get_db)):
    """Get a catalog entry by id."""
    return {"skill": skill_service.get_skill(db, skill_id)}


@router.post("", response_model=SkillEnvelope, status_code=status.HTTP_201_CREATED)
async def create_skill(
    skill_data: SkillCreate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Create a catalog entry (admin only)."""
    skill = skill_service.create_skill(db, skill_data.name, skill_data.description, skill_data.category)
    return {"skill": skill}


@router.put("/{skill_id}", response_model=SkillEnvelope)
async def update_skill(
    skill_id: int,
    skill_data: SkillUpdate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Update a catalog entry (admin only)."""
    skill = skill_service.update_skill(db, skill_id, skill_data.model_dump(exclude_unset=True))
    return {"skill": skill}


@router.delete("/{skill_id}", response_model=MessageResponse)
async def delete_skill(
    skill_id: int,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Delete a catalog entry (admin only)."""
    skill_service.delete_skill(db, skill_id)
    return format_response("Skill deleted successfully")
