"""
Swap lifecycle service.

State machine::

    pending --accept--> accepted --complete--> completed --rate--> (ratings)
       |--reject--> rejected
       `--cancel--> cancelled

rejected, cancelled and completed are terminal. Every transition is a single
conditional UPDATE keyed on the swap id, the acting party and the expected
prior status; an UPDATE that touches no row is the authoritative signal that
the transition is illegal for this actor. Rating a completed swap inserts the
rating and recomputes the rated user's reputation from all ratings received,
inside one transaction that holds a row lock on that user.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from skillswap.core.exceptions import (
    DuplicateRating, Forbidden, InvalidInput, InvalidSwapRequest, NotFound,
    NotFoundOrUnauthorized,
)
from skillswap.models.skill import OfferedSkill, Skill
from skillswap.models.swap import TRANSITIONS, Rating, Swap, SwapStatus
from skillswap.models.user import User

logger = logging.getLogger(__name__)

MIN_SCORE = 1
MAX_SCORE = 5

_TWO_PLACES = Decimal("0.01")


def _unique(ids: Iterable[int]) -> List[int]:
    """Drop repeated ids, keeping first-seen order."""
    return list(dict.fromkeys(ids))


def _swap_query(db: Session):
    return db.query(Swap).options(
        selectinload(Swap.requester),
        selectinload(Swap.provider),
        selectinload(Swap.offered_skills),
        selectinload(Swap.requested_skills),
    )


def _offered_links_query(db: Session, user_id: int, skill_ids: List[int]):
    """The user's links to ``skill_ids``, locked until the swap commits."""
    return (
        db.query(OfferedSkill.skill_id)
        .filter(
            OfferedSkill.user_id == user_id,
            OfferedSkill.skill_id.in_(skill_ids),
        )
        .with_for_update()
    )


def _check_offered(db: Session, user_id: int, skill_ids: List[int]) -> Optional[int]:
    """Return the first skill id the user does not offer, or None."""
    offered = {row.skill_id for row in _offered_links_query(db, user_id, skill_ids)}
    for skill_id in skill_ids:
        if skill_id not in offered:
            return skill_id
    return None


def create_swap(
    db: Session,
    requester: User,
    provider_id: int,
    offered_skill_ids: List[int],
    requested_skill_ids: List[int],
    message: Optional[str] = None,
) -> Swap:
    """
    Create a pending swap.

    The requester must offer every skill in ``offered_skill_ids`` and the
    provider must offer every skill in ``requested_skill_ids``. The swap row
    and both skill bundles are committed together.
    """
    if not offered_skill_ids or not requested_skill_ids:
        raise InvalidInput("offered_skill_ids and requested_skill_ids must be non-empty")
    if provider_id == requester.id:
        raise InvalidInput("Cannot create swap request with yourself")

    offered_skill_ids = _unique(offered_skill_ids)
    requested_skill_ids = _unique(requested_skill_ids)

    provider = db.query(User).filter(User.id == provider_id).first()
    if not provider or provider.is_banned:
        raise NotFound("Provider not found")

    missing = _check_offered(db, requester.id, offered_skill_ids)
    if missing is not None:
        raise InvalidSwapRequest(f"You do not offer the skill with ID {missing}", skill_id=missing)
    missing = _check_offered(db, provider_id, requested_skill_ids)
    if missing is not None:
        raise InvalidSwapRequest(
            f"Provider does not offer the requested skill with ID {missing}", skill_id=missing
        )

    skills = {
        s.id: s
        for s in db.query(Skill).filter(Skill.id.in_(offered_skill_ids + requested_skill_ids))
    }
    swap = Swap(
        requester_id=requester.id,
        provider_id=provider_id,
        status=SwapStatus.PENDING,
        message=message,
        offered_skills=[skills[i] for i in offered_skill_ids],
        requested_skills=[skills[i] for i in requested_skill_ids],
    )
    try:
        db.add(swap)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(swap)

    logger.info(
        "Swap %s created: user %s -> user %s (offered=%s, requested=%s)",
        swap.id, requester.id, provider_id, offered_skill_ids, requested_skill_ids,
    )
    return swap


def _transition(db: Session, swap_id: int, actor_filter, expected: SwapStatus, target: SwapStatus) -> None:
    """Atomically move a swap from ``expected`` to ``target``."""
    if target not in TRANSITIONS.get(expected, ()):
        raise ValueError(f"No transition from {expected.value} to {target.value}")
    try:
        updated = (
            db.query(Swap)
            .filter(Swap.id == swap_id, Swap.status == expected, actor_filter)
            .update(
                {Swap.status: target, Swap.updated_at: func.now()},
                synchronize_session=False,
            )
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    if updated == 0:
        logger.info("Refused %s -> %s on swap %s", expected.value, target.value, swap_id)
        raise NotFoundOrUnauthorized(
            f"Swap request not found or you are not authorized to mark it {target.value}"
        )
    logger.info("Swap %s: %s -> %s", swap_id, expected.value, target.value)


def accept_swap(db: Session, swap_id: int, actor: User) -> None:
    """Provider accepts a pending swap."""
    _transition(db, swap_id, Swap.provider_id == actor.id, SwapStatus.PENDING, SwapStatus.ACCEPTED)


def reject_swap(db: Session, swap_id: int, actor: User) -> None:
    """Provider rejects a pending swap."""
    _transition(db, swap_id, Swap.provider_id == actor.id, SwapStatus.PENDING, SwapStatus.REJECTED)


def cancel_swap(db: Session, swap_id: int, actor: User) -> None:
    """Requester withdraws a pending swap."""
    _transition(db, swap_id, Swap.requester_id == actor.id, SwapStatus.PENDING, SwapStatus.CANCELLED)


def complete_swap(db: Session, swap_id: int, actor: User) -> None:
    """Either party marks an accepted swap as done."""
    _transition(
        db,
        swap_id,
        or_(Swap.requester_id == actor.id, Swap.provider_id == actor.id),
        SwapStatus.ACCEPTED,
        SwapStatus.COMPLETED,
    )


def recompute_reputation(db: Session, user: User) -> None:
    """
    Rewrite ``user.rating`` and ``user.total_ratings`` from every rating the
    user has received. The caller holds the row lock on ``user``.
    """
    avg_score, count = (
        db.query(func.avg(Rating.score), func.count(Rating.id))
        .filter(Rating.rated_id == user.id)
        .one()
    )
    user.total_ratings = count or 0
    if count:
        user.rating = Decimal(str(avg_score)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    else:
        user.rating = Decimal("0.00")


def _party_lock_query(db: Session, user_ids: Iterable[int]):
    """Both parties of a swap, row-locked in ascending id order."""
    return (
        db.query(User)
        .filter(User.id.in_(sorted(set(user_ids))))
        .order_by(User.id)
        .with_for_update()
        .populate_existing()
    )


def rate_swap(db: Session, swap_id: int, actor: User, score: int, comment: Optional[str] = None) -> Rating:
    """
    Rate the counterparty of a completed swap.

    At most one rating per (swap, rater). The insert and the reputation
    recompute share one transaction. Both parties' rows are locked first,
    always in id order, since the rating row references the rater as well
    as the rated user.
    """
    if not isinstance(score, int) or isinstance(score, bool) or not MIN_SCORE <= score <= MAX_SCORE:
        raise InvalidInput(f"Rating must be between {MIN_SCORE} and {MAX_SCORE}")

    swap = db.query(Swap).filter(Swap.id == swap_id, Swap.status == SwapStatus.COMPLETED).first()
    if not swap:
        raise NotFound("Completed swap not found")
    if not swap.is_party(actor.id):
        raise Forbidden("You are not authorized to rate this swap")

    existing = db.query(Rating.id).filter(Rating.swap_id == swap_id, Rating.rater_id == actor.id).first()
    if existing:
        raise DuplicateRating(swap_id, actor.id)

    rated_id = swap.counterparty_id(actor.id)
    try:
        parties = {user.id: user for user in _party_lock_query(db, (actor.id, rated_id))}
        rated = parties[rated_id]
        rating = Rating(
            swap_id=swap_id,
            rater_id=actor.id,
            rated_id=rated_id,
            score=score,
            comment=comment,
        )
        db.add(rating)
        db.flush()
        recompute_reputation(db, rated)
        db.commit()
    except IntegrityError:
        db.rollback()
        # Lost a race against the same rater's concurrent request
        raise DuplicateRating(swap_id, actor.id)
    except Exception:
        db.rollback()
        raise

    db.refresh(rating)
    logger.info(
        "User %s rated user %s %s/5 on swap %s (now %s over %s ratings)",
        actor.id, rated_id, score, swap_id, rated.rating, rated.total_ratings,
    )
    return rating


def get_swap(db: Session, swap_id: int, actor: User) -> Swap:
    """Load one swap for a party (or an admin)."""
    swap = _swap_query(db).options(selectinload(Swap.ratings)).filter(Swap.id == swap_id).first()
    if not swap:
        raise NotFound("Swap not found")
    if not swap.is_party(actor.id) and not actor.is_admin:
        raise Forbidden("You are not a party to this swap")
    return swap


def list_user_swaps(db: Session, user: User, status: Optional[SwapStatus] = None) -> List[Swap]:
    """Swaps where the user is requester or provider, newest first."""
    query = _swap_query(db).filter(
        or_(Swap.requester_id == user.id, Swap.provider_id == user.id)
    )
    if status:
        query = query.filter(Swap.status == status)
    return query.order_by(Swap.created_at.desc(), Swap.id.desc()).all()
