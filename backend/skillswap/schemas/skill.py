"""
Pydantic schemas for the skill catalog and user skill links.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from skillswap.models.skill import ExperienceLevel, Priority, OfferedSkill, WantedSkill
from skillswap.schemas.common import Pagination


class SkillBase(BaseModel):
    """Base skill schema."""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)


class SkillCreate(SkillBase):
    """Schema for catalog entry creation."""
    pass


class SkillUpdate(BaseModel):
    """Schema for catalog entry update."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)


class SkillResponse(SkillBase):
    """Schema for skill response."""
    id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class SkillSummary(BaseModel):
    """Skill as embedded in swaps."""
    id: int
    name: str
    description: Optional[str] = None

    model_config = {"from_attributes": True}


class SkillListResponse(BaseModel):
    skills: List[SkillResponse]
    pagination: Pagination


class SkillEnvelope(BaseModel):
    skill: SkillResponse


class CategoriesResponse(BaseModel):
    categories: List[str]


class PopularSkill(BaseModel):
    """Skill with its demand counters."""
    id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    offered_count: int
    wanted_count: int


class PopularSkillsResponse(BaseModel):
    skills: List[PopularSkill]


class OfferedSkillCreate(BaseModel):
    """Body for adding or updating an offered skill."""
    skill_id: int
    description: Optional[str] = None
    experience_level: ExperienceLevel = ExperienceLevel.INTERMEDIATE


class WantedSkillCreate(BaseModel):
    """Body for adding or updating a wanted skill."""
    skill_id: int
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM


class OfferedSkillResponse(BaseModel):
    """Offered skill as shown on a profile."""
    id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    experience_level: ExperienceLevel
    user_description: Optional[str] = None

    @classmethod
    def from_link(cls, link: OfferedSkill) -> "OfferedSkillResponse":
        return cls(
            id=link.skill.id,
            name=link.skill.name,
            description=link.skill.description,
            category=link.skill.category,
            experience_level=link.experience_level,
            user_description=link.description,
        )


class WantedSkillResponse(BaseModel):
    """Wanted skill as shown on a profile."""
    id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    priority: Priority
    user_description: Optional[str] = None

    @classmethod
    def from_link(cls, link: WantedSkill) -> "WantedSkillResponse":
        return cls(
            id=link.skill.id,
            name=link.skill.name,
            description=link.skill.description,
            category=link.skill.category,
            priority=link.priority,
            user_description=link.description,
        )


class MySkillsResponse(BaseModel):
    skills_offered: List[OfferedSkillResponse]
    skills_wanted: List[WantedSkillResponse]
