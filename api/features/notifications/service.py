"""Service layer for the Notifications feature."""
from typing import List, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from api.features.notifications.entities.notification import Notification, NotificationType
from api.features.notifications.repositories.notification_repository import NotificationRepository
from api.shared.exceptions import NotFoundError, ValidationError
from api.shared.utils import clean_str

logger = structlog.get_logger("hostel.notifications.service")


class NotificationService:
    """Service for user notifications."""

    def __init__(self, list_limit: int = 20):
        self.list_limit = list_limit

    async def notify(
        self,
        user_id: str,
        title: str,
        message: str,
        notification_type: NotificationType = NotificationType.INFO,
        *,
        db_session: AsyncSession,
    ) -> Notification:
        repository = NotificationRepository(db_session)
        notification = await repository.create(
            Notification(
                user_id=user_id,
                title=title,
                message=message,
                type=notification_type.value,
            )
        )
        await db_session.commit()
        logger.info("notification_created", user_id=user_id, type=notification_type.value)
        return notification

    async def list_unread(self, user_id: str, *, db_session: AsyncSession) -> List[Notification]:
        repository = NotificationRepository(db_session)
        return await repository.list_unread(user_id, limit=self.list_limit)

    async def mark_read(
        self, user_id: str, notification_id: Optional[str], *, db_session: AsyncSession
    ) -> None:
        notification_id = clean_str(notification_id)
        if notification_id is None:
            raise ValidationError("Missing notification ID")

        repository = NotificationRepository(db_session)
        notification = await repository.get_by_id(notification_id)
        # Other users' notifications look absent.
        if notification is None or notification.user_id != user_id:
            raise NotFoundError("Notification", notification_id)

        await repository.update_by_id(notification_id, read=True)
        await db_session.commit()
