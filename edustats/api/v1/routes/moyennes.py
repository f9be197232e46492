"""Moyenne API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.api.v1.routes.classes import get_owned_class
from edustats.api.v1.routes.evaluations import get_owned_evaluation
from edustats.api.v1.routes.students import get_owned_student
from edustats.core.database import get_db
from edustats.core.deps import ActiveUser
from edustats.models.user import User
from edustats.schemas.grade import (
    MoyenneBulkUpsert,
    MoyenneCalculationResult,
    MoyenneCreate,
    MoyenneListResponse,
    MoyenneResponse,
)
from edustats.services import moyenne as moyenne_service

router = APIRouter(prefix="/moyennes", tags=["Moyennes"])


# ============== Helper Functions ==============


async def check_moyenne_targets(db: AsyncSession, moyenne_data: MoyenneCreate, user: User) -> None:
    evaluation = await get_owned_evaluation(db, moyenne_data.evaluation_id, user)
    student = await get_owned_student(db, moyenne_data.student_id, user)
    if student.class_id != evaluation.class_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Student and evaluation must belong to the same class",
        )


def list_response(moyennes: list, skip: int, limit: int) -> MoyenneListResponse:
    return MoyenneListResponse(
        items=[MoyenneResponse.model_validate(m) for m in moyennes[skip : skip + limit]],
        total=len(moyennes),
        skip=skip,
        limit=limit,
    )


# ============== Endpoints ==============


@router.get("/evaluation/{evaluation_id}", response_model=MoyenneListResponse)
async def list_evaluation_moyennes(
    evaluation_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(500, ge=1, le=1000, description="Max number of records"),
) -> MoyenneListResponse:
    """Moyennes stored for an evaluation, best first."""
    await get_owned_evaluation(db, evaluation_id, current_user)
    moyennes = await moyenne_service.get_moyennes(db, current_user.id, evaluation_id=evaluation_id)
    return list_response(moyennes, skip, limit)


@router.get("/class/{class_id}", response_model=MoyenneListResponse)
async def list_class_moyennes(
    class_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(500, ge=1, le=1000, description="Max number of records"),
) -> MoyenneListResponse:
    """Moyennes of every evaluation of a class."""
    await get_owned_class(db, class_id, current_user)
    moyennes = await moyenne_service.get_moyennes(db, current_user.id, class_id=class_id)
    return list_response(moyennes, skip, limit)


@router.put("", response_model=MoyenneResponse)
async def upsert_moyenne(
    moyenne_data: MoyenneCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> MoyenneResponse:
    """Store the moyenne of a student for an evaluation, replacing any previous one."""
    await check_moyenne_targets(db, moyenne_data, current_user)
    moyenne = await moyenne_service.upsert_moyenne(db, current_user.id, moyenne_data)
    return MoyenneResponse.model_validate(moyenne)


@router.put("/bulk", response_model=list[MoyenneResponse])
async def bulk_upsert_moyennes(
    bulk_data: MoyenneBulkUpsert,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> list[MoyenneResponse]:
    for item in bulk_data.moyennes:
        await check_moyenne_targets(db, item, current_user)

    moyennes = await moyenne_service.bulk_upsert_moyennes(db, current_user.id, bulk_data.moyennes)
    return [MoyenneResponse.model_validate(m) for m in moyennes]


@router.post("/calculate/{evaluation_id}", response_model=MoyenneCalculationResult)
async def calculate_moyennes(
    evaluation_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> MoyenneCalculationResult:
    """
    Compute the moyennes of an evaluation from its notes.

    The class formula is applied to every present student; the stored
    moyennes are returned with their rank.
    """
    evaluation = await get_owned_evaluation(db, evaluation_id, current_user)
    school_class = await get_owned_class(db, evaluation.class_id, current_user)

    result = await moyenne_service.calculate_moyennes(db, school_class, evaluation)
    return MoyenneCalculationResult(**result)


@router.delete("/{moyenne_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_moyenne(
    moyenne_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> None:
    """Soft delete a moyenne."""
    moyenne = await moyenne_service.get_moyenne_by_id(db, moyenne_id, current_user.id)
    if not moyenne:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Moyenne not found",
        )
    await moyenne_service.deactivate_moyenne(db, moyenne)
