"""Controller for the Notifications feature."""
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from api.features.notifications.dtos import MarkReadRequest, NotificationDTO
from api.features.notifications.service import NotificationService
from api.shared.auth import Caller


class NotificationController:
    """Controller handling the caller's notification panel."""

    def __init__(self, notification_service: NotificationService):
        self.notification_service = notification_service

    async def list_unread(
        self, caller: Caller, *, db_session: AsyncSession
    ) -> List[NotificationDTO]:
        notifications = await self.notification_service.list_unread(
            caller.id, db_session=db_session
        )
        return [NotificationDTO.model_validate(n) for n in notifications]

    async def mark_read(
        self, caller: Caller, request: MarkReadRequest, *, db_session: AsyncSession
    ) -> None:
        await self.notification_service.mark_read(
            caller.id, request.notification_id, db_session=db_session
        )
