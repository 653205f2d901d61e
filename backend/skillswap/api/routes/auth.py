"""
Authentication routes for registration, login and the caller's own profile.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from skillswap.db.session import get_db
from skillswap.schemas.user import UserCreate, UserLogin, Token, UserEnvelope, ProfileUpdate
from skillswap.models.user import User
from skillswap.core.security import create_access_token
from skillswap.api.dependencies import get_current_user
from skillswap.services import user_service

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(user: User) -> Token:
    return Token(access_token=create_access_token(user.id, user.email), user=user)


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: Session = Depends(get_db)):
    """Register a new user and sign them in."""
    user = user_service.register_user(
        db,
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        location=user_data.location,
    )
    return _token_response(user)


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Login and get JWT token."""
    user = user_service.authenticate_user(db, credentials.email, credentials.password)
    return _token_response(user)


@router.get("/me", response_model=UserEnvelope)
async def me(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    return {"user": current_user}


@router.put("/profile", response_model=UserEnvelope)
async def update_profile(
    profile: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update the current user's profile."""
    user = user_service.update_profile(db, current_user, profile.model_dump(exclude_unset=True))
    return {"user": user}
