"""
User directory and account service.
"""
import logging
from typing import List, Optional, Tuple
from sqlalchemy import or_, select
from sqlalchemy.orm import Session, selectinload
from skillswap.core.exceptions import Forbidden, InvalidInput, NotFound, Unauthenticated
from skillswap.core.security import get_password_hash, verify_password
from skillswap.core.utils import LIKE_ESCAPE, contains_pattern, page_offset
from skillswap.models.skill import OfferedSkill, Skill, WantedSkill
from skillswap.models.swap import Rating
from skillswap.models.user import User

logger = logging.getLogger(__name__)

RECENT_RATINGS_LIMIT = 5

PROFILE_FIELDS = ("name", "location", "bio", "profile_photo", "availability", "is_public")
REQUIRED_PROFILE_FIELDS = ("name", "is_public")


def register_user(db: Session, name: str, email: str, password: str, location: Optional[str] = None) -> User:
    """Create an account. Email addresses are unique (case-insensitive)."""
    email = email.strip().lower()
    if db.query(User.id).filter(User.email == email).first():
        raise InvalidInput("Email already exists")

    user = User(
        name=name.strip(),
        email=email,
        hashed_password=get_password_hash(password),
        location=location,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    """Check credentials for login."""
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if not user or not verify_password(password, user.hashed_password):
        raise Unauthenticated("Invalid email or password")
    if user.is_banned:
        raise Forbidden("Account has been banned.")
    return user


def update_profile(db: Session, user: User, fields: dict) -> User:
    """Apply a partial update to the user's own row."""
    for key, value in fields.items():
        if key not in PROFILE_FIELDS:
            continue
        if value is None and key in REQUIRED_PROFILE_FIELDS:
            continue
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user


def _with_skills(query):
    return query.options(
        selectinload(User.offered_skills).joinedload(OfferedSkill.skill),
        selectinload(User.wanted_skills).joinedload(WantedSkill.skill),
    )


def list_public_users(
    db: Session,
    search: Optional[str] = None,
    skill: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[User], int]:
    """
    Public, non-banned users, newest first.

    ``search`` matches name or location; ``skill`` matches the name of a skill
    the user offers or wants.
    """
    query = db.query(User).filter(User.is_public.is_(True), User.is_banned.is_(False))

    if search:
        pattern = contains_pattern(search)
        query = query.filter(or_(
            User.name.ilike(pattern, escape=LIKE_ESCAPE),
            User.location.ilike(pattern, escape=LIKE_ESCAPE),
        ))

    if skill:
        pattern = contains_pattern(skill)
        offering = (
            select(OfferedSkill.user_id)
            .join(Skill, Skill.id == OfferedSkill.skill_id)
            .where(Skill.name.ilike(pattern, escape=LIKE_ESCAPE))
        )
        wanting = (
            select(WantedSkill.user_id)
            .join(Skill, Skill.id == WantedSkill.skill_id)
            .where(Skill.name.ilike(pattern, escape=LIKE_ESCAPE))
        )
        query = query.filter(or_(User.id.in_(offering), User.id.in_(wanting)))

    total = query.count()
    users = (
        _with_skills(query)
        .order_by(User.created_at.desc(), User.id.desc())
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    return users, total


def get_public_user(db: Session, user_id: int) -> User:
    """
    Load a user for the public profile page.

    Private and banned accounts raise the same NotFound as missing ones.
    """
    user = _with_skills(db.query(User)).filter(User.id == user_id).first()
    if not user or not user.is_public or user.is_banned:
        raise NotFound("User not found")
    return user


def recent_ratings(db: Session, user_id: int, limit: int = RECENT_RATINGS_LIMIT) -> List[dict]:
    """Latest ratings the user received, with the rater's name."""
    rows = (
        db.query(Rating, User.name)
        .join(User, User.id == Rating.rater_id)
        .filter(Rating.rated_id == user_id)
        .order_by(Rating.created_at.desc(), Rating.id.desc())
        .limit(limit)
        .all()
    )
    return [
        {
            "rating": rating.score,
            "comment": rating.comment,
            "created_at": rating.created_at,
            "rater_name": rater_name,
        }
        for rating, rater_name in rows
    ]
