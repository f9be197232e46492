"""Pydantic schemas."""

from edustats.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    Token,
)
from edustats.schemas.user import (
    PasswordChange,
    UserResponse,
    UserUpdateMe,
)

__all__ = [
    # Auth
    "AuthResponse",
    "LoginRequest",
    "RefreshRequest",
    "RegisterRequest",
    "Token",
    # User
    "PasswordChange",
    "UserResponse",
    "UserUpdateMe",
]
