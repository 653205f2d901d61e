"""
Pydantic schemas for User entity.
"""
from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional
from datetime import datetime
from skillswap.schemas.common import Pagination
from skillswap.schemas.skill import OfferedSkillResponse, WantedSkillResponse


class UserCreate(BaseModel):
    """Schema for registration."""
    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6)
    location: Optional[str] = Field(None, max_length=255)


class UserLogin(BaseModel):
    """Schema for user login."""
    email: EmailStr
    password: str


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    bio: Optional[str] = None
    profile_photo: Optional[str] = Field(None, max_length=500)
    availability: Optional[List[str]] = None
    is_public: Optional[bool] = None


class UserSummary(BaseModel):
    """Short public view of a user, embedded in swaps."""
    id: int
    name: str
    email: Optional[str] = None
    location: Optional[str] = None
    profile_photo: Optional[str] = None
    rating: float
    total_ratings: int

    model_config = {"from_attributes": True}


class UserPrivateResponse(BaseModel):
    """The caller's own account, including flags."""
    id: int
    name: str
    email: EmailStr
    location: Optional[str] = None
    profile_photo: Optional[str] = None
    bio: Optional[str] = None
    availability: Optional[List[str]] = None
    is_public: bool
    is_admin: bool
    is_banned: bool
    rating: float
    total_ratings: int
    created_at: datetime

    model_config = {"from_attributes": True}


class Token(BaseModel):
    """Schema for JWT token response."""
    access_token: str
    token_type: str = "bearer"
    user: UserPrivateResponse


class UserEnvelope(BaseModel):
    user: UserPrivateResponse


class PublicUserResponse(BaseModel):
    """A user as listed in the public directory."""
    id: int
    name: str
    location: Optional[str] = None
    profile_photo: Optional[str] = None
    bio: Optional[str] = None
    availability: Optional[List[str]] = None
    rating: float
    total_ratings: int
    created_at: datetime
    skills_offered: List[OfferedSkillResponse] = []
    skills_wanted: List[WantedSkillResponse] = []


class ReceivedRating(BaseModel):
    """Rating shown on a public profile."""
    rating: int
    comment: Optional[str] = None
    created_at: datetime
    rater_name: str


class PublicUserDetail(PublicUserResponse):
    recent_ratings: List[ReceivedRating] = []


class PublicUserListResponse(BaseModel):
    users: List[PublicUserResponse]
    pagination: Pagination


class PublicUserEnvelope(BaseModel):
    user: PublicUserDetail


class AdminUserResponse(UserPrivateResponse):
    """User row as seen from the admin console."""
    skills_offered: List[OfferedSkillResponse] = []
    skills_wanted: List[WantedSkillResponse] = []


class AdminUserListResponse(BaseModel):
    users: List[AdminUserResponse]
    pagination: Pagination


class BanUpdate(BaseModel):
    is_banned: bool = True
