"""
User model for marketplace members and administrators.
"""
from sqlalchemy import Column, String, Boolean, Integer, Numeric, Text, JSON
from sqlalchemy.orm import relationship
from skillswap.db.base import BaseModel


class User(BaseModel):
    """User model representing a member of the marketplace."""
    __tablename__ = "users"

    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    location = Column(String(255), nullable=True)
    profile_photo = Column(String(500), nullable=True)
    bio = Column(Text, nullable=True)
    availability = Column(JSON, nullable=True)  # List of free-text slots, e.g. ["weekends"]
    is_public = Column(Boolean, default=True, nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    is_banned = Column(Boolean, default=False, nullable=False)

    # Reputation aggregate, written only by swap_service.recompute_reputation
    rating = Column(Numeric(3, 2), default=0, nullable=False)
    total_ratings = Column(Integer, default=0, nullable=False)

    # Relationships
    offered_skills = relationship("OfferedSkill", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    wanted_skills = relationship("WantedSkill", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
