"""Request authentication: resolves the calling user from a bearer token."""
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.features.users.entities.user import Role
from api.shared.exceptions import UnauthorizedError
from core.security import TokenError, decode_token

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Caller:
    """Authenticated identity passed explicitly into every handler."""

    id: str
    role: Role


async def get_current_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Caller:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()

    try:
        payload = decode_token(credentials.credentials)
        role = Role(str(payload.get("role", "")).upper())
    except (TokenError, ValueError) as e:
        raise UnauthorizedError("Could not validate credentials") from e

    return Caller(id=str(payload["sub"]), role=role)
