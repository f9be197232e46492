"""Evaluation formula service."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.models.evaluation_formula import EvaluationFormula
from edustats.schemas.evaluation_formula import EvaluationFormulaCreate, EvaluationFormulaUpdate

logger = logging.getLogger(__name__)


async def get_formulas(db: AsyncSession, user_id: UUID) -> list[EvaluationFormula]:
    """A teacher's saved formulas, newest first."""
    result = await db.execute(
        select(EvaluationFormula)
        .where(EvaluationFormula.user_id == user_id)
        .order_by(EvaluationFormula.created_at.desc(), EvaluationFormula.name)
    )
    return list(result.scalars().all())


async def get_formula_by_id(
    db: AsyncSession, formula_id: UUID, user_id: UUID
) -> EvaluationFormula | None:
    result = await db.execute(
        select(EvaluationFormula).where(
            EvaluationFormula.id == formula_id, EvaluationFormula.user_id == user_id
        )
    )
    return result.scalar_one_or_none()


async def create_formula(
    db: AsyncSession, user_id: UUID, data: EvaluationFormulaCreate
) -> EvaluationFormula:
    formula = EvaluationFormula(user_id=user_id, name=data.name, formula=data.formula)
    db.add(formula)
    await db.commit()
    await db.refresh(formula)

    logger.info("Saved formula %r for user %s", formula.name, user_id)
    return formula


async def update_formula(
    db: AsyncSession, formula: EvaluationFormula, data: EvaluationFormulaUpdate
) -> EvaluationFormula:
    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(formula, field, value)

    await db.commit()
    await db.refresh(formula)
    return formula


async def delete_formula(db: AsyncSession, formula: EvaluationFormula) -> None:
    await db.delete(formula)
    await db.commit()
