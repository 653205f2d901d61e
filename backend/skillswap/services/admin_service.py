"""
Admin console service: moderation, platform statistics and the message board.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple
from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session, selectinload
from skillswap.core.exceptions import InvalidInput, NotFound
from skillswap.core.utils import LIKE_ESCAPE, contains_pattern, page_offset
from skillswap.models.admin_message import AdminMessage, MessageType
from skillswap.models.skill import OfferedSkill, WantedSkill
from skillswap.models.swap import Rating, Swap, SwapStatus
from skillswap.models.user import User
from skillswap.services.skill_service import popular_skills

logger = logging.getLogger(__name__)

RECENT_WINDOW_DAYS = 30


def list_users(
    db: Session,
    search: Optional[str] = None,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[User], int]:
    """All users, newest first. ``status`` is ``active`` or ``banned``."""
    query = db.query(User)
    if search:
        pattern = contains_pattern(search)
        query = query.filter(or_(
            User.name.ilike(pattern, escape=LIKE_ESCAPE),
            User.email.ilike(pattern, escape=LIKE_ESCAPE),
            User.location.ilike(pattern, escape=LIKE_ESCAPE),
        ))
    if status == "banned":
        query = query.filter(User.is_banned.is_(True))
    elif status == "active":
        query = query.filter(User.is_banned.is_(False))

    total = query.count()
    users = (
        query.options(
            selectinload(User.offered_skills).joinedload(OfferedSkill.skill),
            selectinload(User.wanted_skills).joinedload(WantedSkill.skill),
        )
        .order_by(User.created_at.desc(), User.id.desc())
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    return users, total


def set_ban(db: Session, admin: User, user_id: int, banned: bool) -> User:
    """Ban or unban a user. Setting the current value again is a no-op."""
    if user_id == admin.id:
        raise InvalidInput("You cannot ban yourself")
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    user.is_banned = banned
    db.commit()
    db.refresh(user)
    logger.info("Admin %s %s user %s", admin.id, "banned" if banned else "unbanned", user_id)
    return user


def delete_user(db: Session, admin: User, user_id: int) -> None:
    """Hard delete a user with their links, swaps and ratings."""
    if user_id == admin.id:
        raise InvalidInput("You cannot delete your own account")
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    db.delete(user)
    db.commit()
    logger.warning("Admin %s deleted user %s", admin.id, user_id)


def list_swaps(
    db: Session,
    status: Optional[SwapStatus] = None,
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[Swap], int]:
    query = db.query(Swap)
    if status:
        query = query.filter(Swap.status == status)

    total = query.count()
    swaps = (
        query.options(
            selectinload(Swap.requester),
            selectinload(Swap.provider),
            selectinload(Swap.offered_skills),
            selectinload(Swap.requested_skills),
        )
        .order_by(Swap.created_at.desc(), Swap.id.desc())
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    return swaps, total


def delete_swap(db: Session, admin: User, swap_id: int) -> None:
    """Remove a swap in any state, together with its skill bundles and ratings."""
    swap = db.query(Swap).filter(Swap.id == swap_id).first()
    if not swap:
        raise NotFound("Swap not found")
    status = swap.status
    db.delete(swap)
    db.commit()
    logger.warning("Admin %s deleted swap %s (%s)", admin.id, swap_id, status.value)


def _count_where(condition):
    return func.count(case((condition, 1)))


def compute_stats(db: Session) -> dict:
    """Aggregate counters shown on the admin dashboard."""
    since = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(days=RECENT_WINDOW_DAYS)

    total_users, banned_users, new_users = db.query(
        func.count(User.id),
        _count_where(User.is_banned.is_(True)),
        _count_where(User.created_at >= since),
    ).one()

    swap_row = db.query(
        func.count(Swap.id),
        *[_count_where(Swap.status == s) for s in SwapStatus],
        _count_where(Swap.created_at >= since),
    ).one()
    by_status = dict(zip(SwapStatus, swap_row[1:-1]))

    avg_rating, total_ratings = db.query(func.avg(Rating.score), func.count(Rating.id)).one()

    return {
        "users": {
            "total_users": total_users,
            "banned_users": banned_users,
            "new_users_30d": new_users,
        },
        "swaps": {
            "total_swaps": swap_row[0],
            "pending_swaps": by_status[SwapStatus.PENDING],
            "accepted_swaps": by_status[SwapStatus.ACCEPTED],
            "rejected_swaps": by_status[SwapStatus.REJECTED],
            "cancelled_swaps": by_status[SwapStatus.CANCELLED],
            "completed_swaps": by_status[SwapStatus.COMPLETED],
            "new_swaps_30d": swap_row[-1],
        },
        "popular_skills": popular_skills(db, limit=10),
        "ratings": {
            "avg_rating": round(float(avg_rating), 2) if avg_rating is not None else None,
            "total_ratings": total_ratings,
        },
    }


# Message board

def create_message(db: Session, title: str, message: str, type: MessageType = MessageType.INFO) -> AdminMessage:
    entry = AdminMessage(title=title, message=message, type=type)
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def list_messages(db: Session, active_only: bool = False) -> List[AdminMessage]:
    query = db.query(AdminMessage)
    if active_only:
        query = query.filter(AdminMessage.is_active.is_(True))
    return query.order_by(AdminMessage.created_at.desc(), AdminMessage.id.desc()).all()


def update_message(db: Session, message_id: int, fields: dict) -> AdminMessage:
    entry = db.query(AdminMessage).filter(AdminMessage.id == message_id).first()
    if not entry:
        raise NotFound("Message not found")
    for key, value in fields.items():
        if value is not None:
            setattr(entry, key, value)
    db.commit()
    db.refresh(entry)
    return entry


def delete_message(db: Session, message_id: int) -> None:
    deleted = db.query(AdminMessage).filter(AdminMessage.id == message_id).delete(synchronize_session=False)
    if not deleted:
        raise NotFound("Message not found")
    db.commit()
