"""Evaluation formula library API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.core.database import get_db
from edustats.core.deps import ActiveUser
from edustats.models.evaluation_formula import EvaluationFormula
from edustats.models.user import User
from edustats.schemas.evaluation_formula import (
    EvaluationFormulaCreate,
    EvaluationFormulaListResponse,
    EvaluationFormulaResponse,
    EvaluationFormulaUpdate,
)
from edustats.services import evaluation_formula as evaluation_formula_service

router = APIRouter(prefix="/evaluation-formulas", tags=["Evaluation formulas"])


async def get_owned_formula(db: AsyncSession, formula_id: UUID, user: User) -> EvaluationFormula:
    formula = await evaluation_formula_service.get_formula_by_id(db, formula_id, user.id)
    if not formula:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Formula not found",
        )
    return formula


@router.get("", response_model=EvaluationFormulaListResponse)
async def list_formulas(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> EvaluationFormulaListResponse:
    """The teacher's formula library, newest first."""
    formulas = await evaluation_formula_service.get_formulas(db, current_user.id)
    return EvaluationFormulaListResponse(
        items=[EvaluationFormulaResponse.model_validate(f) for f in formulas],
        total=len(formulas),
    )


@router.post(
    "", response_model=EvaluationFormulaResponse, status_code=status.HTTP_201_CREATED
)
async def create_formula(
    formula_data: EvaluationFormulaCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> EvaluationFormulaResponse:
    """
    Save a named formula.

    The formula must start with "=". It is checked against a class's
    subjects only when applied to that class.
    """
    formula = await evaluation_formula_service.create_formula(db, current_user.id, formula_data)
    return EvaluationFormulaResponse.model_validate(formula)


@router.get("/{formula_id}", response_model=EvaluationFormulaResponse)
async def get_formula(
    formula_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> EvaluationFormulaResponse:
    formula = await get_owned_formula(db, formula_id, current_user)
    return EvaluationFormulaResponse.model_validate(formula)


@router.put("/{formula_id}", response_model=EvaluationFormulaResponse)
async def update_formula(
    formula_id: UUID,
    formula_data: EvaluationFormulaUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> EvaluationFormulaResponse:
    formula = await get_owned_formula(db, formula_id, current_user)
    formula = await evaluation_formula_service.update_formula(db, formula, formula_data)
    return EvaluationFormulaResponse.model_validate(formula)


@router.delete("/{formula_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_formula(
    formula_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> None:
    formula = await get_owned_formula(db, formula_id, current_user)
    await evaluation_formula_service.delete_formula(db, formula)
