"""Shared DTOs for the hostel portal API."""
from datetime import datetime, timezone
from typing import Dict

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class BaseDTO(BaseModel):
    """Base DTO with common configuration.

    Fields are snake_case in Python and camelCase on the wire.
    """

    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel
        json_encoders = {
            datetime: lambda v: v.isoformat(),
        }


class HealthCheckResponse(BaseDTO):
    """Health check response DTO."""
    status: str = Field(description="Service status")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: str = Field(default="0.1.0")
    dependencies: Dict[str, str] = Field(default_factory=dict)


class SuccessResponse(BaseDTO):
    """Acknowledgement for commands that return no payload."""
    success: bool = Field(default=True, description="Whether the command succeeded")
