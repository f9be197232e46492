"""School year API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.core.database import get_db
from edustats.core.deps import ActiveUser
from edustats.models.school_year import SchoolYear
from edustats.models.user import User
from edustats.schemas.school_year import (
    SchoolYearCreate,
    SchoolYearListResponse,
    SchoolYearResponse,
    SchoolYearUpdate,
)
from edustats.services import school_year as school_year_service

router = APIRouter(prefix="/school-years", tags=["School years"])


# ============== Helper Functions ==============


async def get_owned_school_year(db: AsyncSession, school_year_id: UUID, user: User) -> SchoolYear:
    """Get a school year of the current teacher or answer 404."""
    school_year = await school_year_service.get_school_year_by_id(db, school_year_id, user.id)
    if not school_year:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="School year not found",
        )
    return school_year


# ============== Endpoints ==============


@router.get("", response_model=SchoolYearListResponse)
async def list_school_years(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=100, description="Max number of records"),
) -> SchoolYearListResponse:
    """List the teacher's school years, most recent first."""
    school_years = await school_year_service.get_school_years(db, current_user.id)

    return SchoolYearListResponse(
        items=[SchoolYearResponse.model_validate(sy) for sy in school_years[skip : skip + limit]],
        total=len(school_years),
        skip=skip,
        limit=limit,
    )


@router.get("/active", response_model=SchoolYearResponse)
async def get_active_school_year(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> SchoolYearResponse:
    school_year = await school_year_service.get_active_school_year(db, current_user.id)
    if not school_year:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No active school year",
        )
    return SchoolYearResponse.model_validate(school_year)


@router.post("", response_model=SchoolYearResponse, status_code=status.HTTP_201_CREATED)
async def create_school_year(
    school_year_data: SchoolYearCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> SchoolYearResponse:
    """
    Create a school year.

    The first school year of a teacher becomes the active one.
    """
    school_year = await school_year_service.create_school_year(
        db, current_user.id, school_year_data
    )
    return SchoolYearResponse.model_validate(school_year)


@router.get("/{school_year_id}", response_model=SchoolYearResponse)
async def get_school_year(
    school_year_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> SchoolYearResponse:
    school_year = await get_owned_school_year(db, school_year_id, current_user)
    return SchoolYearResponse.model_validate(school_year)


@router.patch("/{school_year_id}", response_model=SchoolYearResponse)
async def update_school_year(
    school_year_id: UUID,
    school_year_data: SchoolYearUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> SchoolYearResponse:
    school_year = await get_owned_school_year(db, school_year_id, current_user)
    school_year = await school_year_service.update_school_year(db, school_year, school_year_data)
    return SchoolYearResponse.model_validate(school_year)


@router.post("/{school_year_id}/activate", response_model=SchoolYearResponse)
async def activate_school_year(
    school_year_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> SchoolYearResponse:
    """Make this school year the active one."""
    school_year = await get_owned_school_year(db, school_year_id, current_user)
    school_year = await school_year_service.set_active_school_year(db, school_year)
    return SchoolYearResponse.model_validate(school_year)


@router.delete("/{school_year_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_school_year(
    school_year_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> None:
    """Delete a school year no class or evaluation refers to."""
    school_year = await get_owned_school_year(db, school_year_id, current_user)
    await school_year_service.delete_school_year(db, school_year)
