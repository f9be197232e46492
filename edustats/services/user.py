"""User service."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.core.security import get_password_hash
from edustats.models.user import User
from edustats.schemas.user import UserUpdateMe


async def get_user_by_id(db: AsyncSession, user_id: UUID) -> User | None:
    """Get user by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def update_profile(db: AsyncSession, user: User, data: UserUpdateMe) -> User:
    """Update the profile fields a teacher may change themselves."""
    update_data = data.model_dump(exclude_unset=True)

    for field, value in update_data.items():
        setattr(user, field, value)

    await db.commit()
    await db.refresh(user)

    return user


async def change_password(db: AsyncSession, user: User, new_password: str) -> None:
    """Change user password."""
    user.password_hash = get_password_hash(new_password)
    await db.commit()
