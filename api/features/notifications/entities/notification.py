"""Notification entity."""
from enum import Enum

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from api.shared.entities.base import BaseEntity


class NotificationType(str, Enum):
    """Notification categories."""

    MESSAGE_REQUEST = "MESSAGE_REQUEST"
    INFO = "INFO"


class Notification(BaseEntity):
    """A short notice shown in a user's notification panel."""

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("user.id"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(
        String(50), nullable=False, default=NotificationType.INFO.value
    )
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("idx_notification_user_read", "user_id", "read"),
    )
