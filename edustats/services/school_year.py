"""School year service."""

import logging
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.core.exceptions import BusinessRuleError, ConflictError
from edustats.models.evaluation import Evaluation
from edustats.models.school_class import SchoolClass
from edustats.models.school_year import SchoolYear
from edustats.schemas.school_year import SchoolYearCreate, SchoolYearUpdate

logger = logging.getLogger(__name__)


async def get_school_year_by_id(
    db: AsyncSession, school_year_id: UUID, user_id: UUID
) -> SchoolYear | None:
    """Get one of the teacher's school years."""
    result = await db.execute(
        select(SchoolYear).where(SchoolYear.id == school_year_id, SchoolYear.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def get_school_years(db: AsyncSession, user_id: UUID) -> list[SchoolYear]:
    """All school years of a teacher, most recent first."""
    result = await db.execute(
        select(SchoolYear)
        .where(SchoolYear.user_id == user_id)
        .order_by(SchoolYear.start_year.desc())
    )
    return list(result.scalars().all())


async def get_active_school_year(db: AsyncSession, user_id: UUID) -> SchoolYear | None:
    result = await db.execute(
        select(SchoolYear).where(SchoolYear.user_id == user_id, SchoolYear.is_active == True)
    )
    return result.scalars().first()


async def _find_overlap(
    db: AsyncSession,
    user_id: UUID,
    start_year: int,
    end_year: int,
    exclude_id: UUID | None = None,
) -> SchoolYear | None:
    query = select(SchoolYear).where(
        SchoolYear.user_id == user_id,
        SchoolYear.start_year < end_year,
        SchoolYear.end_year > start_year,
    )
    if exclude_id is not None:
        query = query.where(SchoolYear.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none()


async def _deactivate_others(db: AsyncSession, user_id: UUID, keep_id: UUID) -> None:
    await db.execute(
        update(SchoolYear)
        .where(SchoolYear.user_id == user_id, SchoolYear.id != keep_id)
        .values(is_active=False)
    )


async def create_school_year(
    db: AsyncSession, user_id: UUID, data: SchoolYearCreate
) -> SchoolYear:
    """
    Create a school year for a teacher.

    The first year a teacher creates becomes the active one. Periods of
    the same teacher may not overlap.
    """
    overlap = await _find_overlap(db, user_id, data.start_year, data.end_year)
    if overlap:
        raise ConflictError(f"School year overlaps with {overlap.name}")

    count_result = await db.execute(
        select(func.count()).select_from(SchoolYear).where(SchoolYear.user_id == user_id)
    )
    is_first = (count_result.scalar() or 0) == 0

    school_year = SchoolYear(
        user_id=user_id,
        start_year=data.start_year,
        end_year=data.end_year,
        is_active=is_first,
    )
    db.add(school_year)
    await db.commit()
    await db.refresh(school_year)

    logger.info("School year %s created for user %s", school_year.name, user_id)
    return school_year


async def update_school_year(
    db: AsyncSession, school_year: SchoolYear, data: SchoolYearUpdate
) -> SchoolYear:
    """Update a school year. Activating it deactivates the teacher's other years."""
    update_data = data.model_dump(exclude_unset=True)

    start_year = update_data.get("start_year", school_year.start_year)
    end_year = update_data.get("end_year", school_year.end_year)
    if "start_year" in update_data or "end_year" in update_data:
        if end_year != start_year + 1:
            raise BusinessRuleError("end_year must follow start_year")
        overlap = await _find_overlap(
            db, school_year.user_id, start_year, end_year, exclude_id=school_year.id
        )
        if overlap:
            raise ConflictError(f"School year overlaps with {overlap.name}")

    if update_data.get("is_active"):
        await _deactivate_others(db, school_year.user_id, school_year.id)

    for field, value in update_data.items():
        setattr(school_year, field, value)

    await db.commit()
    await db.refresh(school_year)

    return school_year


async def set_active_school_year(db: AsyncSession, school_year: SchoolYear) -> SchoolYear:
    """Make this year the teacher's only active one."""
    await _deactivate_others(db, school_year.user_id, school_year.id)
    school_year.is_active = True
    await db.commit()
    await db.refresh(school_year)
    return school_year


async def delete_school_year(db: AsyncSession, school_year: SchoolYear) -> None:
    """Delete a school year nothing refers to any more."""
    classes = await db.execute(
        select(func.count())
        .select_from(SchoolClass)
        .where(SchoolClass.school_year_id == school_year.id, SchoolClass.is_active == True)
    )
    evaluations = await db.execute(
        select(func.count())
        .select_from(Evaluation)
        .where(Evaluation.school_year_id == school_year.id)
    )
    if (classes.scalar() or 0) or (evaluations.scalar() or 0):
        raise ConflictError("School year is still used by classes or evaluations")

    await db.delete(school_year)
    await db.commit()
