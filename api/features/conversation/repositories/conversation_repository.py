"""Conversation repository using base repository pattern."""
from datetime import datetime
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import and_, or_, select, update
from sqlalchemy.dialects import postgresql, sqlite

from api.features.conversation.entities.conversation import (
    Conversation,
    ConversationStatus,
    ThreadFolder,
)
from api.shared.base import BaseRepository
from api.shared.entities.base import utcnow
from api.shared.utils import ordered_pair

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class ConversationRepository(BaseRepository[Conversation]):
    """Repository for conversations with membership-aware queries."""

    model = Conversation

    async def get_by_pair(self, first_id: str, second_id: str) -> Optional[Conversation]:
        """Get the conversation whose membership is exactly {first_id, second_id}."""
        low, high = ordered_pair(first_id, second_id)
        stmt = select(Conversation).where(
            Conversation.participant_low_id == low,
            Conversation.participant_high_id == high,
        ).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def insert_if_absent(self, initiator_id: str, other_id: str) -> bool:
        """Insert a PENDING conversation for the pair unless one already exists.

        Single conditional insert on the pair key. Returns True when this call
        created the row.
        """
        low, high = ordered_pair(initiator_id, other_id)
        now = utcnow()
        values = dict(
            id=str(uuid4()),
            participant_low_id=low,
            participant_high_id=high,
            initiator_id=initiator_id,
            status=ConversationStatus.PENDING,
            last_activity_at=now,
            created_at=now,
            updated_at=now,
        )
        insert = _UPSERT_DIALECTS.get(self.dialect_name)
        if insert is None:
            raise NotImplementedError(
                f"Conditional insert not supported for dialect '{self.dialect_name}'"
            )
        stmt = (
            insert(Conversation)
            .values(**values)
            .on_conflict_do_nothing(
                index_elements=["participant_low_id", "participant_high_id"]
            )
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def list_for_member(
        self,
        user_id: str,
        *,
        folder: Optional[ThreadFolder] = None,
    ) -> List[Conversation]:
        """List conversations ``user_id`` belongs to, most recently active first.

        PRIMARY keeps accepted conversations and pending ones the user started.
        REQUESTS keeps pending ones started by the other side. None keeps all.
        """
        stmt = (
            select(Conversation)
            .where(Conversation.has_member(user_id))
            .execution_options(populate_existing=True)
        )

        if folder == ThreadFolder.PRIMARY:
            stmt = stmt.where(
                or_(
                    Conversation.status == ConversationStatus.ACCEPTED,
                    and_(
                        Conversation.status == ConversationStatus.PENDING,
                        Conversation.initiator_id == user_id,
                    ),
                )
            )
        elif folder == ThreadFolder.REQUESTS:
            stmt = stmt.where(
                Conversation.status == ConversationStatus.PENDING,
                Conversation.initiator_id != user_id,
            )

        stmt = stmt.order_by(
            Conversation.last_activity_at.desc(), Conversation.id.asc()
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def set_status(self, conversation_id: str, status: ConversationStatus) -> Optional[Conversation]:
        """Set conversation status."""
        return await self.update_by_id(conversation_id, status=status)

    async def touch(self, conversation_id: str, at: Optional[datetime] = None) -> None:
        """Stamp last activity time."""
        stmt = (
            update(Conversation)
            .where(Conversation.id == conversation_id)
            .values(last_activity_at=at or utcnow())
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        await self.session.flush()
