"""Exceptions for the Conversation feature."""
from api.shared.exceptions import ForbiddenError, NotFoundError, ValidationError

CONVERSATION_NOT_FOUND = "Conversation not found or access denied"


class ConversationNotFoundError(NotFoundError):
    """Raised when a conversation id does not exist."""

    def __init__(self, conversation_id: str):
        super().__init__("Conversation", conversation_id, CONVERSATION_NOT_FOUND)


class ConversationAccessDeniedError(ForbiddenError):
    """Raised when the caller is not a member of the conversation."""

    def __init__(self, conversation_id: str):
        super().__init__("Conversation", conversation_id, CONVERSATION_NOT_FOUND)


class RecipientNotFoundError(NotFoundError):
    """Raised when the receiver of a message does not exist."""

    def __init__(self, user_id: str):
        super().__init__("User", user_id, f"Receiver '{user_id}' not found")


class NoStaffAvailableError(NotFoundError):
    """Raised when a student message has no default inbox to land in."""

    def __init__(self):
        super().__init__("User", "staff", "No staff available to receive message")


class EmptyMessageError(ValidationError):
    """Raised when message content is missing or blank."""

    def __init__(self):
        super().__init__("Message content is required")
