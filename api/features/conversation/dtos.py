"""DTOs for the Conversation feature."""
from datetime import datetime
from typing import Optional

from pydantic import Field

from api.features.conversation.entities.conversation import ConversationStatus, ThreadFolder
from api.features.users.entities.user import Role
from api.shared.dtos import BaseDTO


class SendMessageRequest(BaseDTO):
    """Send a message; ``receiver_id`` may be omitted by students."""

    content: Optional[str] = Field(default=None, description="Message text")
    receiver_id: Optional[str] = Field(default=None, description="Receiving user id")


class AcceptConversationRequest(BaseDTO):
    """Accept a pending conversation."""

    conversation_id: Optional[str] = Field(default=None, description="Conversation identifier")


class MessageDTO(BaseDTO):
    """Conversation message DTO."""

    id: str = Field(description="Message identifier")
    conversation_id: str = Field(description="Parent conversation")
    sender_id: str = Field(description="Sending user")
    receiver_id: str = Field(description="Receiving user")
    content: str = Field(description="Message content")
    created_at: datetime = Field(description="Creation timestamp")


class ThreadSummaryDTO(BaseDTO):
    """One conversation as seen by one of its members.

    ``id`` is the other participant, so a summary can be used directly as the
    ``targetId`` of a thread fetch.
    """

    id: str = Field(description="The other participant")
    conversation_id: str = Field(description="Conversation identifier")
    name: str = Field(description="Other participant display name")
    role: Role = Field(description="Other participant role")
    last_message: Optional[str] = Field(default=None, description="Preview of the latest message")
    status: ConversationStatus = Field(description="Conversation status")
    initiator_id: str = Field(description="Participant who sent the first message")
    folder: ThreadFolder = Field(description="List this thread belongs to for the caller")
    last_activity_at: datetime = Field(description="Last activity timestamp")


class UserSearchResultDTO(BaseDTO):
    """Candidate user to message, annotated with any existing conversation.

    Shares the thread summary keys; conversation fields are null when the
    caller has never talked to this user.
    """

    id: str = Field(description="User identifier")
    name: str = Field(description="Display name")
    email: str = Field(description="Email address")
    role: Role = Field(description="Portal role")
    conversation_id: Optional[str] = Field(default=None, description="Existing conversation")
    status: Optional[ConversationStatus] = Field(
        default=None, description="Existing conversation status"
    )
    initiator_id: Optional[str] = Field(
        default=None, description="Participant who sent the first message"
    )
    last_message: Optional[str] = Field(default=None, description="Preview of the latest message")
