"""
Skill catalog service: catalog queries and the user's offered/wanted links.
"""
import logging
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
from skillswap.core.exceptions import InvalidInput, NotFound
from skillswap.core.utils import LIKE_ESCAPE, contains_pattern, page_offset
from skillswap.models.skill import ExperienceLevel, OfferedSkill, Priority, Skill, WantedSkill
from skillswap.models.user import User

logger = logging.getLogger(__name__)


def list_skills(
    db: Session,
    search: Optional[str] = None,
    category: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Skill], int]:
    """Page of catalog entries and the total number of matches."""
    query = db.query(Skill)
    if search:
        query = query.filter(Skill.name.ilike(contains_pattern(search), escape=LIKE_ESCAPE))
    if category:
        query = query.filter(Skill.category == category)

    total = query.count()
    skills = query.order_by(Skill.name.asc(), Skill.id.asc()).offset(page_offset(page, limit)).limit(limit).all()
    return skills, total


def list_categories(db: Session) -> List[str]:
    rows = (
        db.query(Skill.category)
        .filter(Skill.category.isnot(None))
        .distinct()
        .order_by(Skill.category)
        .all()
    )
    return [row.category for row in rows]


def get_skill(db: Session, skill_id: int) -> Skill:
    skill = db.query(Skill).filter(Skill.id == skill_id).first()
    if not skill:
        raise NotFound("Skill not found")
    return skill


def popular_skills(db: Session, limit: int = 10) -> List[dict]:
    """
    Skills ranked by how many users offer plus how many want them.

    Each side is counted in its own subquery so the two joins do not
    multiply each other.
    """
    offered = (
        db.query(OfferedSkill.skill_id, func.count(OfferedSkill.id).label("n"))
        .group_by(OfferedSkill.skill_id)
        .subquery()
    )
    wanted = (
        db.query(WantedSkill.skill_id, func.count(WantedSkill.id).label("n"))
        .group_by(WantedSkill.skill_id)
        .subquery()
    )
    offered_count = func.coalesce(offered.c.n, 0)
    wanted_count = func.coalesce(wanted.c.n, 0)
    rows = (
        db.query(Skill, offered_count.label("offered_count"), wanted_count.label("wanted_count"))
        .outerjoin(offered, offered.c.skill_id == Skill.id)
        .outerjoin(wanted, wanted.c.skill_id == Skill.id)
        .order_by((offered_count + wanted_count).desc(), Skill.name.asc())
        .limit(limit)
        .all()
    )
    return [
        {
            "id": skill.id,
            "name": skill.name,
            "description": skill.description,
            "category": skill.category,
            "offered_count": offered_n,
            "wanted_count": wanted_n,
        }
        for skill, offered_n, wanted_n in rows
    ]


def create_skill(db: Session, name: str, description: Optional[str] = None, category: Optional[str] = None) -> Skill:
    skill = Skill(name=name, description=description, category=category)
    db.add(skill)
    db.commit()
    db.refresh(skill)
    logger.info("Skill %s (%s) added to catalog", skill.id, skill.name)
    return skill


def update_skill(db: Session, skill_id: int, fields: dict) -> Skill:
    if "name" in fields and not fields["name"]:
        raise InvalidInput("Skill name is required")
    skill = get_skill(db, skill_id)
    for key, value in fields.items():
        setattr(skill, key, value)
    db.commit()
    db.refresh(skill)
    return skill


def delete_skill(db: Session, skill_id: int) -> None:
    """Remove a catalog entry and, by cascade, every link to it."""
    skill = get_skill(db, skill_id)
    db.delete(skill)
    db.commit()
    logger.info("Skill %s deleted from catalog", skill_id)


def get_user_skills(db: Session, user_id: int) -> Tuple[List[OfferedSkill], List[WantedSkill]]:
    """Offered and wanted links of a user, with their skills loaded."""
    offered = (
        db.query(OfferedSkill)
        .options(joinedload(OfferedSkill.skill))
        .filter(OfferedSkill.user_id == user_id)
        .order_by(OfferedSkill.id)
        .all()
    )
    wanted = (
        db.query(WantedSkill)
        .options(joinedload(WantedSkill.skill))
        .filter(WantedSkill.user_id == user_id)
        .order_by(WantedSkill.id)
        .all()
    )
    return offered, wanted


def _upsert_link(db: Session, model, user: User, skill_id: int, values: dict):
    """Insert or update the (user, skill) link; one row per pair, last write wins."""
    get_skill(db, skill_id)
    link = db.query(model).filter(model.user_id == user.id, model.skill_id == skill_id).first()
    if link:
        for key, value in values.items():
            setattr(link, key, value)
        db.commit()
    else:
        try:
            link = model(user_id=user.id, skill_id=skill_id, **values)
            db.add(link)
            db.commit()
        except IntegrityError:
            # A concurrent request inserted the same pair first
            db.rollback()
            link = db.query(model).filter(model.user_id == user.id, model.skill_id == skill_id).one()
            for key, value in values.items():
                setattr(link, key, value)
            db.commit()
    db.refresh(link)
    return link


def upsert_offered_skill(
    db: Session,
    user: User,
    skill_id: int,
    experience_level: ExperienceLevel = ExperienceLevel.INTERMEDIATE,
    description: Optional[str] = None,
) -> OfferedSkill:
    """Add a skill to the user's offered set, or update level and note if present."""
    return _upsert_link(
        db, OfferedSkill, user, skill_id,
        {"experience_level": experience_level, "description": description},
    )


def upsert_wanted_skill(
    db: Session,
    user: User,
    skill_id: int,
    priority: Priority = Priority.MEDIUM,
    description: Optional[str] = None,
) -> WantedSkill:
    """Add a skill to the user's wanted set, or update priority and note if present."""
    return _upsert_link(
        db, WantedSkill, user, skill_id,
        {"priority": priority, "description": description},
    )


def remove_offered_skill(db: Session, user: User, skill_id: int) -> None:
    db.query(OfferedSkill).filter(
        OfferedSkill.user_id == user.id,
        OfferedSkill.skill_id == skill_id,
    ).delete(synchronize_session=False)
    db.commit()


def remove_wanted_skill(db: Session, user: User, skill_id: int) -> None:
    db.query(WantedSkill).filter(
        WantedSkill.user_id == user.id,
        WantedSkill.skill_id == skill_id,
    ).delete(synchronize_session=False)
    db.commit()
