"""Service layer for the Conversation feature.

Three per-session collaborators do the work:

* ``ConversationResolver`` finds or creates the single conversation joining
  two users.
* ``MessageLedger`` appends messages and returns ordered history.
* ``ThreadLister`` builds the primary / requests thread lists of a user.

``ConversationService`` is the stateless facade the controller talks to; it
builds the collaborators around the request's session.
"""
from typing import List, Optional, Tuple

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from api.features.conversation.dtos import ThreadSummaryDTO, UserSearchResultDTO
from api.features.conversation.entities.conversation import (
    Conversation,
    ConversationStatus,
    ThreadFolder,
)
from api.features.conversation.entities.message import Message
from api.features.conversation.exceptions import (
    ConversationAccessDeniedError,
    ConversationNotFoundError,
    EmptyMessageError,
    NoStaffAvailableError,
    RecipientNotFoundError,
)
from api.features.conversation.repositories.conversation_repository import ConversationRepository
from api.features.conversation.repositories.message_repository import MessageRepository
from api.features.users.entities.user import DEFAULT_RECEIVER_ROLES
from api.features.users.repositories.user_repository import UserRepository
from api.shared.auth import Caller
from api.shared.exceptions import InvalidArgumentError, StorageUnavailableError, ValidationError
from api.shared.utils import clean_str, truncate_text

logger = structlog.get_logger("hostel.conversation.service")


def _require_pair(caller_id: Optional[str], other_user_id: Optional[str]) -> Tuple[str, str]:
    caller_id, other_user_id = clean_str(caller_id), clean_str(other_user_id)
    if not caller_id or not other_user_id:
        raise InvalidArgumentError("Both participants are required")
    if caller_id == other_user_id:
        raise InvalidArgumentError("Cannot start a conversation with yourself")
    return caller_id, other_user_id


class ConversationResolver:
    """Finds or creates the conversation between two users."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.conversations = ConversationRepository(session)
        self.users = UserRepository(session)

    async def find(self, caller_id: str, other_user_id: str) -> Optional[Conversation]:
        caller_id, other_user_id = _require_pair(caller_id, other_user_id)
        return await self.conversations.get_by_pair(caller_id, other_user_id)

    async def find_or_create(
        self, caller_id: str, other_user_id: str
    ) -> Tuple[Conversation, bool]:
        """Return the pair's conversation and whether this call created it."""
        caller_id, other_user_id = _require_pair(caller_id, other_user_id)

        if await self.users.get_by_id(other_user_id) is None:
            raise RecipientNotFoundError(other_user_id)

        created = await self.conversations.insert_if_absent(caller_id, other_user_id)
        if created:
            await self.session.commit()

        conversation = await self.conversations.get_by_pair(caller_id, other_user_id)
        if conversation is None:
            raise StorageUnavailableError(
                "Conversation missing after conditional insert",
                {"participants": [caller_id, other_user_id]},
            )

        if created:
            logger.info(
                "conversation_created",
                conversation_id=conversation.id,
                initiator_id=caller_id,
                other_user_id=other_user_id,
            )
        return conversation, created


class MessageLedger:
    """Append-only message history of conversations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.conversations = ConversationRepository(session)
        self.messages = MessageRepository(session)

    async def append(
        self,
        conversation_id: str,
        sender_id: str,
        receiver_id: str,
        content: Optional[str],
    ) -> Message:
        text = clean_str(content)
        if text is None:
            raise EmptyMessageError()

        conversation = await self.conversations.get_by_id(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        if sender_id == receiver_id or not (
            conversation.is_member(sender_id) and conversation.is_member(receiver_id)
        ):
            raise ValidationError(
                "Sender and receiver must be the conversation members",
                {"conversation_id": conversation_id},
            )

        message = await self.messages.create(
            Message(
                conversation_id=conversation_id,
                sender_id=sender_id,
                receiver_id=receiver_id,
                content=text,
            )
        )
        await self.session.commit()

        # Second write: ordering signal for thread lists.
        await self.conversations.touch(conversation_id)
        await self.session.commit()

        logger.info(
            "message_appended",
            conversation_id=conversation_id,
            message_id=message.id,
            sender_id=sender_id,
        )
        return message

    async def list_for(self, conversation_id: str) -> List[Message]:
        return await self.messages.list_for_conversation(conversation_id)

    async def latest_for(self, conversation_id: str) -> Optional[Message]:
        return await self.messages.get_latest(conversation_id)


class ThreadLister:
    """Thread summaries of one user, split into primary and requests."""

    def __init__(self, session: AsyncSession, preview_length: int = 50):
        self.conversations = ConversationRepository(session)
        self.users = UserRepository(session)
        self.ledger = MessageLedger(session)
        self.preview_length = preview_length

    async def list_primary(self, caller_id: str) -> List[ThreadSummaryDTO]:
        return await self._list(caller_id, ThreadFolder.PRIMARY)

    async def list_requests(self, caller_id: str) -> List[ThreadSummaryDTO]:
        return await self._list(caller_id, ThreadFolder.REQUESTS)

    async def _list(self, caller_id: str, folder: ThreadFolder) -> List[ThreadSummaryDTO]:
        conversations = await self.conversations.list_for_member(caller_id, folder=folder)

        other_ids = {c.other_participant(caller_id) for c in conversations} - {None}
        users = {u.id: u for u in await self.users.get_many_by_ids(sorted(other_ids))}

        summaries: List[ThreadSummaryDTO] = []
        for conversation in conversations:
            other = users.get(conversation.other_participant(caller_id) or "")
            if other is None:
                logger.warning(
                    "thread_skipped",
                    conversation_id=conversation.id,
                    caller_id=caller_id,
                )
                continue

            latest = await self.ledger.latest_for(conversation.id)
            summaries.append(
                ThreadSummaryDTO(
                    id=other.id,
                    conversation_id=conversation.id,
                    name=other.name,
                    role=other.role,
                    last_message=(
                        truncate_text(latest.content, self.preview_length)
                        if latest
                        else None
                    ),
                    status=conversation.status,
                    initiator_id=conversation.initiator_id,
                    folder=conversation.folder_for(caller_id),
                    last_activity_at=conversation.last_activity_at,
                )
            )
        return summaries


class ConversationService:
    """Stateless facade over resolver, ledger and lister."""

    def __init__(self, preview_length: int = 50, search_limit: int = 20):
        self.preview_length = preview_length
        self.search_limit = search_limit

    async def find_or_create(
        self, caller_id: str, other_user_id: str, *, db_session: AsyncSession
    ) -> Tuple[Conversation, bool]:
        return await ConversationResolver(db_session).find_or_create(caller_id, other_user_id)

    async def find(
        self, caller_id: str, other_user_id: str, *, db_session: AsyncSession
    ) -> Optional[Conversation]:
        return await ConversationResolver(db_session).find(caller_id, other_user_id)

    async def append_message(
        self,
        conversation_id: str,
        sender_id: str,
        receiver_id: str,
        content: Optional[str],
        *,
        db_session: AsyncSession,
    ) -> Message:
        return await MessageLedger(db_session).append(
            conversation_id, sender_id, receiver_id, content
        )

    async def list_messages(
        self, conversation_id: str, *, db_session: AsyncSession
    ) -> List[Message]:
        return await MessageLedger(db_session).list_for(conversation_id)

    async def list_threads(
        self, caller_id: str, folder: ThreadFolder, *, db_session: AsyncSession
    ) -> List[ThreadSummaryDTO]:
        lister = ThreadLister(db_session, preview_length=self.preview_length)
        if folder == ThreadFolder.REQUESTS:
            return await lister.list_requests(caller_id)
        return await lister.list_primary(caller_id)

    async def accept(
        self, caller_id: str, conversation_id: Optional[str], *, db_session: AsyncSession
    ) -> None:
        """Mark a conversation ACCEPTED. Idempotent for members."""
        conversation_id = clean_str(conversation_id)
        if conversation_id is None:
            raise ValidationError("Missing conversation ID")

        repository = ConversationRepository(db_session)
        conversation = await repository.get_by_id(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        if not conversation.is_member(caller_id):
            raise ConversationAccessDeniedError(conversation_id)

        if conversation.status != ConversationStatus.ACCEPTED:
            await repository.set_status(conversation_id, ConversationStatus.ACCEPTED)
            await db_session.commit()
            logger.info(
                "conversation_accepted",
                conversation_id=conversation_id,
                accepted_by=caller_id,
            )

    async def resolve_receiver(
        self, caller: Caller, receiver_id: Optional[str], *, db_session: AsyncSession
    ) -> str:
        """Explicit receiver, or the default inbox for roles that have one."""
        receiver_id = clean_str(receiver_id)
        if receiver_id:
            return receiver_id

        inbox_roles = DEFAULT_RECEIVER_ROLES[caller.role]
        if inbox_roles is None:
            raise ValidationError("Receiver is required")

        staff = await UserRepository(db_session).first_with_role(inbox_roles)
        if staff is None:
            raise NoStaffAvailableError()
        return staff.id

    async def search_users(
        self, caller_id: str, query: Optional[str], *, db_session: AsyncSession
    ) -> List[UserSearchResultDTO]:
        query = clean_str(query)
        if query is None:
            return []

        users = await UserRepository(db_session).search(
            query, exclude_id=caller_id, limit=self.search_limit
        )
        conversations = await ConversationRepository(db_session).list_for_member(caller_id)
        by_other = {c.other_participant(caller_id): c for c in conversations}

        ledger = MessageLedger(db_session)
        results = []
        for user in users:
            result = UserSearchResultDTO(
                id=user.id, name=user.name, email=user.email, role=user.role
            )
            conversation = by_other.get(user.id)
            if conversation is not None:
                latest = await ledger.latest_for(conversation.id)
                result.conversation_id = conversation.id
                result.status = conversation.status
                result.initiator_id = conversation.initiator_id
                result.last_message = (
                    truncate_text(latest.content, self.preview_length) if latest else None
                )
            results.append(result)
        return results
