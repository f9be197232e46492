"""SchoolClass service layer."""

import logging
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.core.exceptions import ConflictError
from edustats.models.school_class import SchoolClass
from edustats.models.student import Student
from edustats.schemas.school_class import SchoolClassCreate, SchoolClassUpdate

logger = logging.getLogger(__name__)


async def get_school_class_by_id(
    db: AsyncSession, class_id: UUID, user_id: UUID
) -> SchoolClass | None:
    """Get one of the teacher's active classes."""
    result = await db.execute(
        select(SchoolClass).where(
            SchoolClass.id == class_id,
            SchoolClass.user_id == user_id,
            SchoolClass.is_active == True,
        )
    )
    return result.scalar_one_or_none()


async def get_school_classes(
    db: AsyncSession,
    user_id: UUID,
    *,
    school_year_id: UUID | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 100,
) -> tuple[list[SchoolClass], int]:
    """Get the teacher's active classes with optional filters."""
    query = select(SchoolClass).where(
        SchoolClass.user_id == user_id, SchoolClass.is_active == True
    )
    count_query = (
        select(func.count())
        .select_from(SchoolClass)
        .where(SchoolClass.user_id == user_id, SchoolClass.is_active == True)
    )

    if school_year_id is not None:
        query = query.where(SchoolClass.school_year_id == school_year_id)
        count_query = count_query.where(SchoolClass.school_year_id == school_year_id)

    if search:
        search_filter = SchoolClass.name.ilike(f"%{search}%") | SchoolClass.level.ilike(
            f"%{search}%"
        )
        query = query.where(search_filter)
        count_query = count_query.where(search_filter)

    query = query.order_by(SchoolClass.name).offset(skip).limit(limit)

    result = await db.execute(query)
    classes = list(result.scalars().all())

    count_result = await db.execute(count_query)
    total = count_result.scalar() or 0

    return classes, total


async def count_students(db: AsyncSession, class_ids: list[UUID]) -> dict[UUID, int]:
    """Active student count per class."""
    if not class_ids:
        return {}
    result = await db.execute(
        select(Student.class_id, func.count())
        .where(Student.class_id.in_(class_ids), Student.is_active == True)
        .group_by(Student.class_id)
    )
    return {class_id: count for class_id, count in result.all()}


async def _check_unique_name(
    db: AsyncSession, user_id: UUID, name: str, exclude_id: UUID | None = None
) -> None:
    query = select(SchoolClass.id).where(
        SchoolClass.user_id == user_id,
        SchoolClass.is_active == True,
        func.lower(SchoolClass.name) == name.lower(),
    )
    if exclude_id is not None:
        query = query.where(SchoolClass.id != exclude_id)
    result = await db.execute(query.limit(1))
    if result.scalar_one_or_none() is not None:
        raise ConflictError(f"A class named '{name}' already exists")


async def create_school_class(
    db: AsyncSession, user_id: UUID, data: SchoolClassCreate
) -> SchoolClass:
    """Create a new class."""
    await _check_unique_name(db, user_id, data.name)

    school_class = SchoolClass(
        user_id=user_id,
        school_year_id=data.school_year_id,
        name=data.name,
        level=data.level,
    )
    db.add(school_class)
    await db.commit()
    await db.refresh(school_class)

    logger.info("Class %s created for user %s", school_class.id, user_id)
    return school_class


async def update_school_class(
    db: AsyncSession, school_class: SchoolClass, data: SchoolClassUpdate
) -> SchoolClass:
    """Update a class."""
    update_data = data.model_dump(exclude_unset=True)

    if "name" in update_data and update_data["name"] != school_class.name:
        await _check_unique_name(
            db, school_class.user_id, update_data["name"], exclude_id=school_class.id
        )

    for field, value in update_data.items():
        setattr(school_class, field, value)

    await db.commit()
    await db.refresh(school_class)

    return school_class


async def deactivate_school_class(db: AsyncSession, school_class: SchoolClass) -> None:
    """Soft delete a class together with its students."""
    school_class.is_active = False
    await db.execute(
        update(Student).where(Student.class_id == school_class.id).values(is_active=False)
    )
    await db.commit()
