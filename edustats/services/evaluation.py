"""Evaluation service."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.models.evaluation import Evaluation
from edustats.models.school_class import SchoolClass
from edustats.schemas.evaluation import EvaluationCreate, EvaluationUpdate


async def get_evaluation_by_id(
    db: AsyncSession, evaluation_id: UUID, user_id: UUID
) -> Evaluation | None:
    """Get an evaluation of one of the teacher's classes."""
    result = await db.execute(
        select(Evaluation)
        .join(SchoolClass, Evaluation.class_id == SchoolClass.id)
        .where(Evaluation.id == evaluation_id, SchoolClass.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def get_evaluations(
    db: AsyncSession,
    class_id: UUID,
    *,
    school_year_id: UUID | None = None,
) -> list[Evaluation]:
    """Evaluations of a class in chronological order."""
    query = select(Evaluation).where(Evaluation.class_id == class_id)
    if school_year_id is not None:
        query = query.where(Evaluation.school_year_id == school_year_id)

    result = await db.execute(query.order_by(Evaluation.date, Evaluation.created_at))
    return list(result.scalars().all())


async def create_evaluation(db: AsyncSession, data: EvaluationCreate) -> Evaluation:
    """Create an evaluation."""
    evaluation = Evaluation(
        class_id=data.class_id,
        school_year_id=data.school_year_id,
        nom=data.nom,
        date=data.date,
    )
    db.add(evaluation)
    await db.commit()
    await db.refresh(evaluation)

    return evaluation


async def update_evaluation(
    db: AsyncSession, evaluation: Evaluation, data: EvaluationUpdate
) -> Evaluation:
    """Update an evaluation."""
    update_data = data.model_dump(exclude_unset=True)

    for field, value in update_data.items():
        setattr(evaluation, field, value)

    await db.commit()
    await db.refresh(evaluation)

    return evaluation


async def delete_evaluation(db: AsyncSession, evaluation: Evaluation) -> None:
    """Delete an evaluation together with its notes and moyennes."""
    await db.delete(evaluation)
    await db.commit()
