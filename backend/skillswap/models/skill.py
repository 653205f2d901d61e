"""
Skill catalog and the user-to-skill links.
"""
from sqlalchemy import Column, String, Text, ForeignKey, Integer, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
from skillswap.db.base import BaseModel
import enum


class ExperienceLevel(str, enum.Enum):
    """How well a user masters an offered skill."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class Priority(str, enum.Enum):
    """How much a user wants to learn a skill."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Skill(BaseModel):
    """Catalog entry. Referenced by users, never owned by them."""
    __tablename__ = "skills"

    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True, index=True)

    # Relationships
    offered_by = relationship("OfferedSkill", back_populates="skill", cascade="all, delete-orphan", passive_deletes=True)
    wanted_by = relationship("WantedSkill", back_populates="skill", cascade="all, delete-orphan", passive_deletes=True)


class OfferedSkill(BaseModel):
    """A skill a user can teach."""
    __tablename__ = "user_skills"
    __table_args__ = (
        UniqueConstraint("user_id", "skill_id", name="unique_user_skill"),
    )

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    skill_id = Column(Integer, ForeignKey("skills.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(Text, nullable=True)
    experience_level = Column(
        SQLEnum(ExperienceLevel, values_callable=lambda e: [m.value for m in e]),
        default=ExperienceLevel.INTERMEDIATE,
        nullable=False,
    )

    # Relationships
    user = relationship("User", back_populates="offered_skills")
    skill = relationship("Skill", back_populates="offered_by")


class WantedSkill(BaseModel):
    """A skill a user wants to learn."""
    __tablename__ = "wanted_skills"
    __table_args__ = (
        UniqueConstraint("user_id", "skill_id", name="unique_user_wanted_skill"),
    )

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    skill_id = Column(Integer, ForeignKey("skills.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(Text, nullable=True)
    priority = Column(
        SQLEnum(Priority, values_callable=lambda e: [m.value for m in e]),
        default=Priority.MEDIUM,
        nullable=False,
    )

    # Relationships
    user = relationship("User", back_populates="wanted_skills")
    skill = relationship("Skill", back_populates="wanted_by")
