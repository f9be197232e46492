"""Subject API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.api.v1.routes.classes import get_owned_class
from edustats.core.database import get_db
from edustats.core.deps import ActiveUser
from edustats.models.subject import Subject
from edustats.models.user import User
from edustats.schemas.subject import (
    SubjectCreate,
    SubjectListResponse,
    SubjectResponse,
    SubjectUpdate,
)
from edustats.services import subject as subject_service

router = APIRouter(prefix="/subjects", tags=["Subjects"])


async def get_owned_subject(db: AsyncSession, subject_id: UUID, user: User) -> Subject:
    subject = await subject_service.get_subject_by_id(db, subject_id, user.id)
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Subject not found",
        )
    return subject


@router.get("", response_model=SubjectListResponse)
async def list_subjects(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
    class_id: UUID | None = Query(None, description="Filter by class ID"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=100, description="Max number of records"),
) -> SubjectListResponse:
    """List the teacher's subjects in creation order."""
    subjects = await subject_service.get_subjects(db, current_user.id, class_id=class_id)

    return SubjectListResponse(
        items=[SubjectResponse.model_validate(s) for s in subjects[skip : skip + limit]],
        total=len(subjects),
        skip=skip,
        limit=limit,
    )


@router.post("", response_model=SubjectResponse, status_code=status.HTTP_201_CREATED)
async def create_subject(
    subject_data: SubjectCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> SubjectResponse:
    """Create a subject in one of the teacher's classes."""
    await get_owned_class(db, subject_data.class_id, current_user)
    subject = await subject_service.create_subject(db, current_user.id, subject_data)
    return SubjectResponse.model_validate(subject)


@router.get("/{subject_id}", response_model=SubjectResponse)
async def get_subject(
    subject_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> SubjectResponse:
    subject = await get_owned_subject(db, subject_id, current_user)
    return SubjectResponse.model_validate(subject)


@router.patch("/{subject_id}", response_model=SubjectResponse)
async def update_subject(
    subject_id: UUID,
    subject_data: SubjectUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> SubjectResponse:
    subject = await get_owned_subject(db, subject_id, current_user)
    subject = await subject_service.update_subject(db, subject, subject_data)
    return SubjectResponse.model_validate(subject)


@router.delete("/{subject_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subject(
    subject_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> None:
    """Delete a subject. Subjects with notes are kept."""
    subject = await get_owned_subject(db, subject_id, current_user)
    await subject_service.delete_subject(db, subject)
