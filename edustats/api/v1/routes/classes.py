"""Class API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.api.v1.routes.school_years import get_owned_school_year
from edustats.core.database import get_db
from edustats.core.deps import ActiveUser
from edustats.models.school_class import SchoolClass
from edustats.models.user import User
from edustats.schemas.school_class import (
    SchoolClassCreate,
    SchoolClassListResponse,
    SchoolClassResponse,
    SchoolClassUpdate,
)
from edustats.services import school_class as school_class_service

router = APIRouter(prefix="/classes", tags=["Classes"])


# ============== Helper Functions ==============


async def get_owned_class(db: AsyncSession, class_id: UUID, user: User) -> SchoolClass:
    """Get an active class of the current teacher or answer 404."""
    school_class = await school_class_service.get_school_class_by_id(db, class_id, user.id)
    if not school_class:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Class not found",
        )
    return school_class


async def class_response(db: AsyncSession, school_class: SchoolClass) -> SchoolClassResponse:
    counts = await school_class_service.count_students(db, [school_class.id])
    return SchoolClassResponse.model_validate(school_class).model_copy(
        update={"student_count": counts.get(school_class.id, 0)}
    )


# ============== Endpoints ==============


@router.get("", response_model=SchoolClassListResponse)
async def list_classes(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
    school_year_id: UUID | None = Query(None, description="Filter by school year ID"),
    search: str | None = Query(None, description="Search by name or level"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=100, description="Max number of records"),
) -> SchoolClassListResponse:
    """List the teacher's classes with their active student counts."""
    classes, total = await school_class_service.get_school_classes(
        db,
        current_user.id,
        school_year_id=school_year_id,
        search=search,
        skip=skip,
        limit=limit,
    )
    counts = await school_class_service.count_students(db, [c.id for c in classes])

    return SchoolClassListResponse(
        items=[
            SchoolClassResponse.model_validate(c).model_copy(
                update={"student_count": counts.get(c.id, 0)}
            )
            for c in classes
        ],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.post("", response_model=SchoolClassResponse, status_code=status.HTTP_201_CREATED)
async def create_class(
    class_data: SchoolClassCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> SchoolClassResponse:
    """Create a new class."""
    if class_data.school_year_id:
        await get_owned_school_year(db, class_data.school_year_id, current_user)

    school_class = await school_class_service.create_school_class(db, current_user.id, class_data)
    return SchoolClassResponse.model_validate(school_class)


@router.get("/{class_id}", response_model=SchoolClassResponse)
async def get_class(
    class_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> SchoolClassResponse:
    school_class = await get_owned_class(db, class_id, current_user)
    return await class_response(db, school_class)


@router.patch("/{class_id}", response_model=SchoolClassResponse)
async def update_class(
    class_id: UUID,
    class_data: SchoolClassUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> SchoolClassResponse:
    school_class = await get_owned_class(db, class_id, current_user)
    if class_data.school_year_id:
        await get_owned_school_year(db, class_data.school_year_id, current_user)

    school_class = await school_class_service.update_school_class(db, school_class, class_data)
    return await class_response(db, school_class)


@router.delete("/{class_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_class(
    class_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> None:
    """Soft delete a class and its students."""
    school_class = await get_owned_class(db, class_id, current_user)
    await school_class_service.deactivate_school_class(db, school_class)
