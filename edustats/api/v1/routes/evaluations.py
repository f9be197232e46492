"""Evaluation API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.api.v1.routes.classes import get_owned_class
from edustats.api.v1.routes.school_years import get_owned_school_year
from edustats.core.database import get_db
from edustats.core.deps import ActiveUser
from edustats.models.evaluation import Evaluation
from edustats.models.user import User
from edustats.schemas.evaluation import (
    EvaluationCreate,
    EvaluationListResponse,
    EvaluationResponse,
    EvaluationUpdate,
)
from edustats.services import evaluation as evaluation_service

router = APIRouter(tags=["Evaluations"])


async def get_owned_evaluation(db: AsyncSession, evaluation_id: UUID, user: User) -> Evaluation:
    """Get an evaluation of one of the teacher's classes or answer 404."""
    evaluation = await evaluation_service.get_evaluation_by_id(db, evaluation_id, user.id)
    if not evaluation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Evaluation not found",
        )
    return evaluation


@router.get("/classes/{class_id}/evaluations", response_model=EvaluationListResponse)
async def list_evaluations(
    class_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
    school_year_id: UUID | None = Query(None, description="Filter by school year ID"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=100, description="Max number of records"),
) -> EvaluationListResponse:
    """List the evaluations of a class in chronological order."""
    await get_owned_class(db, class_id, current_user)
    evaluations = await evaluation_service.get_evaluations(
        db, class_id, school_year_id=school_year_id
    )

    return EvaluationListResponse(
        items=[EvaluationResponse.model_validate(e) for e in evaluations[skip : skip + limit]],
        total=len(evaluations),
        skip=skip,
        limit=limit,
    )


@router.post("/evaluations", response_model=EvaluationResponse, status_code=status.HTTP_201_CREATED)
async def create_evaluation(
    evaluation_data: EvaluationCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> EvaluationResponse:
    """Create an evaluation for a class and school year of the teacher."""
    await get_owned_class(db, evaluation_data.class_id, current_user)
    await get_owned_school_year(db, evaluation_data.school_year_id, current_user)

    evaluation = await evaluation_service.create_evaluation(db, evaluation_data)
    return EvaluationResponse.model_validate(evaluation)


@router.get("/evaluations/{evaluation_id}", response_model=EvaluationResponse)
async def get_evaluation(
    evaluation_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> EvaluationResponse:
    evaluation = await get_owned_evaluation(db, evaluation_id, current_user)
    return EvaluationResponse.model_validate(evaluation)


@router.patch("/evaluations/{evaluation_id}", response_model=EvaluationResponse)
async def update_evaluation(
    evaluation_id: UUID,
    evaluation_data: EvaluationUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> EvaluationResponse:
    evaluation = await get_owned_evaluation(db, evaluation_id, current_user)
    if evaluation_data.school_year_id:
        await get_owned_school_year(db, evaluation_data.school_year_id, current_user)

    evaluation = await evaluation_service.update_evaluation(db, evaluation, evaluation_data)
    return EvaluationResponse.model_validate(evaluation)


@router.delete("/evaluations/{evaluation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_evaluation(
    evaluation_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> None:
    """Delete an evaluation with its notes and moyennes."""
    evaluation = await get_owned_evaluation(db, evaluation_id, current_user)
    await evaluation_service.delete_evaluation(db, evaluation)
