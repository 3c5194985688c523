"""User entity and the closed set of portal roles."""
from enum import Enum

from sqlalchemy import String, Enum as SQLEnum, Index
from sqlalchemy.orm import Mapped, mapped_column

from api.shared.entities.base import BaseEntity


class Role(str, Enum):
    """Portal role enumeration."""

    ADMIN = "ADMIN"
    STAFF = "STAFF"
    STUDENT = "STUDENT"


# Roles whose messages land in a default inbox when no receiver is given.
# Every Role must appear here; None means a receiver is mandatory.
DEFAULT_RECEIVER_ROLES: dict[Role, tuple[Role, ...] | None] = {
    Role.ADMIN: None,
    Role.STAFF: None,
    Role.STUDENT: (Role.ADMIN, Role.STAFF),
}


class User(BaseEntity):
    """Portal account. Owned by the user-administration module; read-only here."""

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    role: Mapped[Role] = mapped_column(
        SQLEnum(Role, name="user_role"), nullable=False, default=Role.STUDENT
    )

    __table_args__ = (Index("idx_user_role", "role"),)
