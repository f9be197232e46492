"""Password hashing and JWT helpers."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from passlib.context import CryptContext

from edustats.core.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_REFRESH = "refresh"
TOKEN_TYPE_ADMIN = "admin"


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _encode(data: dict[str, Any], token_type: str, expires_delta: timedelta, secret: str) -> str:
    now = datetime.now(timezone.utc)
    to_encode = data.copy()
    to_encode.update(
        {
            "type": token_type,
            "iat": now,
            "exp": now + expires_delta,
            "iss": settings.JWT_ISSUER,
            "aud": settings.JWT_AUDIENCE,
        }
    )
    return jwt.encode(to_encode, secret, algorithm=settings.ALGORITHM)


def _decode(token: str, secret: str) -> dict[str, Any] | None:
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[settings.ALGORITHM],
            issuer=settings.JWT_ISSUER,
            audience=settings.JWT_AUDIENCE,
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        return None
    except jwt.InvalidTokenError:
        return None


def create_access_token(data: dict[str, Any]) -> str:
    """Create a short-lived access token for a teacher."""
    return _encode(
        data,
        TOKEN_TYPE_ACCESS,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        settings.SECRET_KEY,
    )


def create_refresh_token(data: dict[str, Any]) -> str:
    """Create a refresh token signed with its own secret."""
    return _encode(
        data,
        TOKEN_TYPE_REFRESH,
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        settings.REFRESH_SECRET_KEY,
    )


def create_admin_token(data: dict[str, Any]) -> str:
    """Create an access token for a platform administrator."""
    return _encode(
        data,
        TOKEN_TYPE_ADMIN,
        timedelta(minutes=settings.ADMIN_TOKEN_EXPIRE_MINUTES),
        settings.SECRET_KEY,
    )


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Decode a token signed with the access secret (teacher or admin)."""
    return _decode(token, settings.SECRET_KEY)


def decode_refresh_token(token: str) -> dict[str, Any] | None:
    payload = _decode(token, settings.REFRESH_SECRET_KEY)
    if payload is None or payload.get("type") != TOKEN_TYPE_REFRESH:
        return None
    return payload
