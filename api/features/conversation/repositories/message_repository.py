"""Message repository using base repository pattern."""
from typing import List, Optional

from sqlalchemy import select

from api.features.conversation.entities.message import Message
from api.shared.base import BaseRepository


class MessageRepository(BaseRepository[Message]):
    """Repository for message history."""

    model = Message

    async def list_for_conversation(self, conversation_id: str) -> List[Message]:
        """Messages of a conversation in chronological order."""
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc(), Message.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_latest(self, conversation_id: str) -> Optional[Message]:
        """Most recent message of a conversation, if any."""
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
