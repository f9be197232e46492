"""Authentication service."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.core.config import settings
from edustats.core.exceptions import ConflictError
from edustats.core.security import (
    create_access_token,
    create_refresh_token,
    get_password_hash,
    verify_password,
)
from edustats.models.admin import Admin
from edustats.models.user import User
from edustats.schemas.auth import RegisterRequest
from edustats.services import compte_gratuit as trial_service

logger = logging.getLogger(__name__)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Get user by email (case-insensitive)."""
    result = await db.execute(select(User).where(User.email == email.strip().lower()))
    return result.scalar_one_or_none()


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User | None:
    """Authenticate user with email and password."""
    user = await get_user_by_email(db, email)

    if not user:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user


async def register_user(db: AsyncSession, data: RegisterRequest) -> User:
    """
    Create a teacher account and open its free trial.

    Raises ConflictError when the email is already registered.
    """
    if await get_user_by_email(db, data.email):
        raise ConflictError("Email already registered")

    user = User(
        email=data.email,
        password_hash=get_password_hash(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        gender=data.gender,
        establishment=data.establishment,
        direction_regionale=data.direction_regionale,
        secteur_pedagogique=data.secteur_pedagogique,
    )
    db.add(user)
    await db.flush()

    trial_service.add_trial(db, user.id)

    await db.commit()
    await db.refresh(user)

    logger.info("Registered teacher %s with a %d-day trial", user.id, settings.TRIAL_DAYS)
    return user


def issue_tokens(user: User) -> dict:
    """Build the access/refresh pair for a teacher."""
    claims = {"sub": str(user.id), "email": user.email}
    return {
        "access_token": create_access_token(claims),
        "refresh_token": create_refresh_token({"sub": str(user.id)}),
        "token_type": "bearer",
        "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    }


async def get_admin_by_username(db: AsyncSession, username: str) -> Admin | None:
    result = await db.execute(select(Admin).where(Admin.username == username))
    return result.scalar_one_or_none()


async def authenticate_admin(db: AsyncSession, username: str, password: str) -> Admin | None:
    """Authenticate a platform administrator."""
    admin = await get_admin_by_username(db, username)

    if not admin or not admin.is_active:
        return None

    if not verify_password(password, admin.password_hash):
        return None

    return admin
