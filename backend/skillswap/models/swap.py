"""
Swap model and the ratings left on completed swaps.
"""
from sqlalchemy import (
    Column, Table, Text, ForeignKey, Integer, CheckConstraint, UniqueConstraint,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
from skillswap.db.base import Base, BaseModel
import enum


class SwapStatus(str, enum.Enum):
    """Swap status enumeration."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


TERMINAL_STATUSES = frozenset({SwapStatus.REJECTED, SwapStatus.CANCELLED, SwapStatus.COMPLETED})

# Legal forward edges of the swap lifecycle
TRANSITIONS = {
    SwapStatus.PENDING: frozenset({SwapStatus.ACCEPTED, SwapStatus.REJECTED, SwapStatus.CANCELLED}),
    SwapStatus.ACCEPTED: frozenset({SwapStatus.COMPLETED}),
}


# Skills the requester gives in exchange
swap_offered_skills = Table(
    "swap_offered_skills",
    Base.metadata,
    Column("swap_id", Integer, ForeignKey("swaps.id", ondelete="CASCADE"), primary_key=True),
    Column("skill_id", Integer, ForeignKey("skills.id", ondelete="CASCADE"), primary_key=True),
)

# Skills requested from the provider
swap_requested_skills = Table(
    "swap_requested_skills",
    Base.metadata,
    Column("swap_id", Integer, ForeignKey("swaps.id", ondelete="CASCADE"), primary_key=True),
    Column("skill_id", Integer, ForeignKey("skills.id", ondelete="CASCADE"), primary_key=True),
)


class Swap(BaseModel):
    """A proposed or executed skill exchange between two users."""
    __tablename__ = "swaps"
    __table_args__ = (
        CheckConstraint("requester_id <> provider_id", name="ck_swap_distinct_parties"),
    )

    requester_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    provider_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        SQLEnum(SwapStatus, values_callable=lambda e: [m.value for m in e]),
        default=SwapStatus.PENDING,
        nullable=False,
        index=True,
    )
    message = Column(Text, nullable=True)

    # Relationships
    requester = relationship("User", foreign_keys=[requester_id])
    provider = relationship("User", foreign_keys=[provider_id])
    offered_skills = relationship("Skill", secondary=swap_offered_skills, order_by="Skill.id")
    requested_skills = relationship("Skill", secondary=swap_requested_skills, order_by="Skill.id")
    ratings = relationship("Rating", back_populates="swap", cascade="all, delete-orphan", passive_deletes=True)

    def is_party(self, user_id: int) -> bool:
        return user_id in (self.requester_id, self.provider_id)

    def counterparty_id(self, user_id: int) -> int:
        """The other participant of the swap."""
        return self.provider_id if user_id == self.requester_id else self.requester_id


class Rating(BaseModel):
    """Score one party gives the other after a completed swap."""
    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("swap_id", "rater_id", name="unique_swap_rating"),
        CheckConstraint("score >= 1 AND score <= 5", name="ck_rating_score_range"),
    )

    swap_id = Column(Integer, ForeignKey("swaps.id", ondelete="CASCADE"), nullable=False, index=True)
    rater_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    rated_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    score = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)

    # Relationships
    swap = relationship("Swap", back_populates="ratings")
    rater = relationship("User", foreign_keys=[rater_id])
    rated = relationship("User", foreign_keys=[rated_id])
