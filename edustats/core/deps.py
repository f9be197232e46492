"""Dependencies for FastAPI routes."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.core.database import get_db
from edustats.core.security import TOKEN_TYPE_ACCESS, TOKEN_TYPE_ADMIN, decode_access_token
from edustats.models.admin import Admin
from edustats.models.user import User
from edustats.services import payment as payment_service

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login/form")


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _subject_id(token: str, token_type: str) -> UUID:
    payload = decode_access_token(token)
    if payload is None or payload.get("type") != token_type:
        raise _credentials_exception()

    subject: str | None = payload.get("sub")
    if subject is None:
        raise _credentials_exception()

    try:
        return UUID(subject)
    except ValueError:
        raise _credentials_exception()


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get current authenticated teacher from JWT token."""
    user_id = _subject_id(token, TOKEN_TYPE_ACCESS)

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise _credentials_exception()

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user",
        )

    return user


async def get_current_admin(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Admin:
    """Get current administrator from an admin token."""
    admin_id = _subject_id(token, TOKEN_TYPE_ADMIN)

    result = await db.execute(select(Admin).where(Admin.id == admin_id))
    admin = result.scalar_one_or_none()

    if admin is None or not admin.is_active:
        raise _credentials_exception()

    return admin


async def get_subscribed_user(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Teacher with a running trial or a paid subscription."""
    subscription = await payment_service.get_subscription_status(db, current_user.id)
    if not subscription["has_access"]:
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail="Your free trial has ended. A subscription is required to continue.",
        )
    return current_user


# Common dependency aliases
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentAdmin = Annotated[Admin, Depends(get_current_admin)]
ActiveUser = Annotated[User, Depends(get_subscribed_user)]
