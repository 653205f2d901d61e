"""Models package - Import all models for SQLAlchemy registration."""
from skillswap.models.user import User
from skillswap.models.skill import Skill, OfferedSkill, WantedSkill, ExperienceLevel, Priority
from skillswap.models.swap import (
    Swap, SwapStatus, Rating, swap_offered_skills, swap_requested_skills,
)
from skillswap.models.admin_message import AdminMessage, MessageType

__all__ = [
    "User",
    "Skill",
    "OfferedSkill",
    "WantedSkill",
    "ExperienceLevel",
    "Priority",
    "Swap",
    "SwapStatus",
    "Rating",
    "swap_offered_skills",
    "swap_requested_skills",
    "AdminMessage",
    "MessageType",
]
