"""Notification repository using base repository pattern."""
from typing import List

from sqlalchemy import select

from api.features.notifications.entities.notification import Notification
from api.shared.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Repository for notification entities."""

    model = Notification

    async def list_unread(self, user_id: str, *, limit: int = 20) -> List[Notification]:
        """Unread notifications of a user, newest first."""
        stmt = (
            select(Notification)
            .where(Notification.user_id == user_id, Notification.read.is_(False))
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
