"""DTOs for the Notifications feature."""
from datetime import datetime
from typing import Optional

from pydantic import Field

from api.shared.dtos import BaseDTO


class NotificationDTO(BaseDTO):
    """Notification DTO."""

    id: str = Field(description="Notification identifier")
    title: str = Field(description="Short title")
    message: str = Field(description="Notification body")
    type: str = Field(description="Notification category")
    read: bool = Field(description="Whether the user has seen it")
    created_at: datetime = Field(description="Creation timestamp")


class MarkReadRequest(BaseDTO):
    """Mark one notification as read."""

    notification_id: Optional[str] = Field(default=None, description="Notification identifier")
