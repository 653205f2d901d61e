"""
Broadcast messages shown to all users.
"""
from sqlalchemy import Column, String, Text, Boolean, Enum as SQLEnum
from skillswap.db.base import BaseModel
import enum


class MessageType(str, enum.Enum):
    """Severity of an admin message."""
    INFO = "info"
    WARNING = "warning"
    ALERT = "alert"


class AdminMessage(BaseModel):
    """Admin message board entry."""
    __tablename__ = "admin_messages"

    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(
        SQLEnum(MessageType, values_callable=lambda e: [m.value for m in e]),
        default=MessageType.INFO,
        nullable=False,
    )
    is_active = Column(Boolean, default=True, nullable=False, index=True)
