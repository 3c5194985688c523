"""Controller for the Conversation feature."""
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from api.features.conversation.dtos import (
    AcceptConversationRequest,
    MessageDTO,
    SendMessageRequest,
    ThreadSummaryDTO,
    UserSearchResultDTO,
)
from api.features.conversation.entities.conversation import ThreadFolder
from api.features.conversation.exceptions import EmptyMessageError
from api.features.conversation.service import ConversationService
from api.features.notifications.entities.notification import NotificationType
from api.features.notifications.service import NotificationService
from api.shared.auth import Caller
from api.shared.exceptions import ValidationError
from api.shared.utils import clean_str, truncate_text


class ConversationController:
    """Controller handling direct messages between portal users."""

    def __init__(
        self,
        conversation_service: ConversationService,
        notification_service: NotificationService,
    ):
        self.conversation_service = conversation_service
        self.notification_service = notification_service

    async def send_message(
        self, caller: Caller, request: SendMessageRequest, *, db_session: AsyncSession
    ) -> MessageDTO:
        """Resolve the conversation with the receiver and append the message."""
        if clean_str(request.content) is None:
            raise EmptyMessageError()

        receiver_id = await self.conversation_service.resolve_receiver(
            caller, request.receiver_id, db_session=db_session
        )
        conversation, created = await self.conversation_service.find_or_create(
            caller.id, receiver_id, db_session=db_session
        )
        message = await self.conversation_service.append_message(
            conversation.id,
            caller.id,
            receiver_id,
            request.content,
            db_session=db_session,
        )

        if created:
            await self.notification_service.notify(
                receiver_id,
                "New message request",
                truncate_text(message.content, 100),
                NotificationType.MESSAGE_REQUEST,
                db_session=db_session,
            )

        return MessageDTO.model_validate(message)

    async def get_thread(
        self, caller: Caller, target_id: str, *, db_session: AsyncSession
    ) -> List[MessageDTO]:
        """Messages between caller and target, oldest first; empty if none."""
        if clean_str(target_id) == caller.id:
            return []
        conversation = await self.conversation_service.find(
            caller.id, target_id, db_session=db_session
        )
        if conversation is None:
            return []
        messages = await self.conversation_service.list_messages(
            conversation.id, db_session=db_session
        )
        return [MessageDTO.model_validate(m) for m in messages]

    async def list_threads(
        self, caller: Caller, folder: Optional[str], *, db_session: AsyncSession
    ) -> List[ThreadSummaryDTO]:
        folder = clean_str(folder)
        try:
            thread_folder = ThreadFolder(folder.lower()) if folder else ThreadFolder.PRIMARY
        except ValueError as e:
            raise ValidationError(
                f"Unknown thread type '{folder}'",
                {"allowed": [f.value for f in ThreadFolder]},
            ) from e
        return await self.conversation_service.list_threads(
            caller.id, thread_folder, db_session=db_session
        )

    async def search_users(
        self, caller: Caller, query: str, *, db_session: AsyncSession
    ) -> List[UserSearchResultDTO]:
        return await self.conversation_service.search_users(
            caller.id, query, db_session=db_session
        )

    async def accept(
        self, caller: Caller, request: AcceptConversationRequest, *, db_session: AsyncSession
    ) -> None:
        await self.conversation_service.accept(
            caller.id, request.conversation_id, db_session=db_session
        )
