"""Moyenne service."""

import logging
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.models.evaluation import Evaluation
from edustats.models.grade import Moyenne
from edustats.models.school_class import SchoolClass
from edustats.models.student import Student
from edustats.schemas.grade import MoyenneCreate
from edustats.services import results as results_service

logger = logging.getLogger(__name__)


async def get_moyenne_by_id(db: AsyncSession, moyenne_id: UUID, user_id: UUID) -> Moyenne | None:
    result = await db.execute(
        select(Moyenne).where(
            Moyenne.id == moyenne_id, Moyenne.user_id == user_id, Moyenne.is_active == True
        )
    )
    return result.scalar_one_or_none()


async def get_moyennes(
    db: AsyncSession,
    user_id: UUID,
    *,
    evaluation_id: UUID | None = None,
    class_id: UUID | None = None,
) -> list[Moyenne]:
    """Active moyennes of a teacher, by evaluation or by class."""
    query = select(Moyenne).where(Moyenne.user_id == user_id, Moyenne.is_active == True)

    if evaluation_id is not None:
        query = query.where(Moyenne.evaluation_id == evaluation_id)
    if class_id is not None:
        query = query.join(Student, Moyenne.student_id == Student.id).where(
            Student.class_id == class_id
        )

    result = await db.execute(query.order_by(Moyenne.moyenne.desc()))
    return list(result.scalars().all())


async def _stage_upsert(
    db: AsyncSession,
    user_id: UUID,
    *,
    student_id: UUID,
    evaluation_id: UUID,
    value: Decimal,
    on_date: date | None,
) -> Moyenne:
    result = await db.execute(
        select(Moyenne).where(
            Moyenne.student_id == student_id,
            Moyenne.evaluation_id == evaluation_id,
            Moyenne.user_id == user_id,
        )
    )
    moyenne = result.scalars().first()
    if moyenne is None:
        moyenne = Moyenne(
            user_id=user_id,
            student_id=student_id,
            evaluation_id=evaluation_id,
            moyenne=value,
            date=on_date or date.today(),
        )
        db.add(moyenne)
    else:
        moyenne.moyenne = value
        moyenne.date = on_date or moyenne.date
        moyenne.is_active = True
    return moyenne


async def _stage_from_schema(db: AsyncSession, user_id: UUID, data: MoyenneCreate) -> Moyenne:
    return await _stage_upsert(
        db,
        user_id,
        student_id=data.student_id,
        evaluation_id=data.evaluation_id,
        value=data.moyenne,
        on_date=data.date,
    )


async def upsert_moyenne(db: AsyncSession, user_id: UUID, data: MoyenneCreate) -> Moyenne:
    """Store a moyenne; one per student, evaluation and teacher."""
    moyenne = await _stage_from_schema(db, user_id, data)
    await db.commit()
    await db.refresh(moyenne)
    return moyenne


async def bulk_upsert_moyennes(
    db: AsyncSession, user_id: UUID, items: list[MoyenneCreate]
) -> list[Moyenne]:
    moyennes = []
    for item in items:
        moyennes.append(await _stage_from_schema(db, user_id, item))
        await db.flush()

    await db.commit()
    for moyenne in moyennes:
        await db.refresh(moyenne)
    return moyennes


async def deactivate_moyenne(db: AsyncSession, moyenne: Moyenne) -> None:
    """Soft delete a moyenne."""
    moyenne.is_active = False
    await db.commit()


async def calculate_moyennes(
    db: AsyncSession, school_class: SchoolClass, evaluation: Evaluation
) -> dict:
    """
    Compute and store the moyennes of an evaluation.

    Students without any note, or marked absent everywhere, are skipped and
    lose any moyenne stored by an earlier calculation. The stored moyennes
    are returned ranked.
    """
    sheet = await results_service.build_grade_sheet(db, school_class, evaluation)
    present_ids = {row.student.id for row in sheet.present_rows}

    stale = await db.execute(
        select(Moyenne).where(
            Moyenne.evaluation_id == evaluation.id,
            Moyenne.user_id == school_class.user_id,
            Moyenne.is_active == True,
        )
    )
    for moyenne in stale.scalars().all():
        if moyenne.student_id not in present_ids:
            moyenne.is_active = False

    items = []
    for row in sheet.present_rows:
        await _stage_upsert(
            db,
            school_class.user_id,
            student_id=row.student.id,
            evaluation_id=evaluation.id,
            value=row.moyenne,
            on_date=evaluation.date,
        )
        await db.flush()
        items.append(
            {
                "student_id": row.student.id,
                "student_name": row.student.name,
                "moyenne": row.moyenne,
                "rank": row.rank,
            }
        )

    await db.commit()
    logger.info("Computed %d moyennes for evaluation %s", len(items), evaluation.id)

    return {"evaluation_id": evaluation.id, "formula": sheet.formula, "items": items}
