"""Conversation entity: a direct-message channel between two users."""
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint, Enum as SQLEnum, or_
from sqlalchemy.orm import Mapped, mapped_column

from api.shared.entities.base import BaseEntity, utcnow


class ConversationStatus(str, Enum):
    """Conversation lifecycle: PENDING until the receiver accepts."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"


class ThreadFolder(str, Enum):
    """Which list a conversation appears in, from one member's viewpoint."""

    PRIMARY = "primary"
    REQUESTS = "requests"


class Conversation(BaseEntity):
    """Two-party conversation.

    Members are stored as a sorted pair so that the unique constraint on
    (participant_low_id, participant_high_id) is the unordered-pair key.
    """

    participant_low_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("user.id"), nullable=False
    )
    participant_high_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("user.id"), nullable=False
    )
    initiator_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("user.id"), nullable=False
    )
    status: Mapped[ConversationStatus] = mapped_column(
        SQLEnum(ConversationStatus, name="conversation_status"),
        nullable=False,
        default=ConversationStatus.PENDING,
    )
    last_activity_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    __table_args__ = (
        UniqueConstraint(
            "participant_low_id", "participant_high_id", name="uq_conversation_pair"
        ),
        Index("idx_conversation_low", "participant_low_id"),
        Index("idx_conversation_high", "participant_high_id"),
        Index("idx_conversation_last_activity", "last_activity_at"),
    )

    @classmethod
    def has_member(cls, user_id: str):
        """SQL predicate: ``user_id`` is one of the two members."""
        return or_(cls.participant_low_id == user_id, cls.participant_high_id == user_id)

    @property
    def participant_ids(self) -> set[str]:
        return {self.participant_low_id, self.participant_high_id}

    def is_member(self, user_id: str) -> bool:
        return user_id in self.participant_ids

    def other_participant(self, user_id: str) -> str | None:
        """The member that is not ``user_id``; None for malformed self-conversations."""
        others = self.participant_ids - {user_id}
        if len(others) != 1 or not self.is_member(user_id):
            return None
        return next(iter(others))

    def folder_for(self, user_id: str) -> ThreadFolder | None:
        """Where this conversation is listed for ``user_id``; None for non-members."""
        if not self.is_member(user_id):
            return None
        if self.status == ConversationStatus.ACCEPTED or self.initiator_id == user_id:
            return ThreadFolder.PRIMARY
        return ThreadFolder.REQUESTS
