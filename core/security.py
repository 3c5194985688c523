from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from core.settings import SETTINGS


class TokenError(Exception):
    """Raised when a bearer token cannot be decoded or is incomplete."""

    pass


def create_access_token(
    data: Dict[str, Any], expires_delta: Optional[timedelta] = None
) -> str:
    """Create JWT access token"""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=SETTINGS.AUTH.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(
        to_encode,
        SETTINGS.AUTH.JWT_SECRET_KEY.get_secret_value(),
        algorithm=SETTINGS.AUTH.JWT_ALGORITHM,
    )


def decode_token(token: str) -> Dict[str, Any]:
    """Decode JWT access token"""
    try:
        payload = jwt.decode(
            token,
            SETTINGS.AUTH.JWT_SECRET_KEY.get_secret_value(),
            algorithms=[SETTINGS.AUTH.JWT_ALGORITHM],
        )
    except JWTError as e:
        raise TokenError("Could not validate credentials") from e

    if payload.get("type") != "access" or not payload.get("sub"):
        raise TokenError("Could not validate credentials")
    return payload
