"""Student API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.api.v1.routes.classes import get_owned_class
from edustats.core.config import settings
from edustats.core.database import get_db
from edustats.core.deps import ActiveUser
from edustats.models.student import Student
from edustats.models.user import Gender, User
from edustats.schemas.student import (
    StudentBulkCreate,
    StudentCreate,
    StudentImportResult,
    StudentListResponse,
    StudentResponse,
    StudentUpdate,
)
from edustats.services import student as student_service

router = APIRouter(tags=["Students"])


# ============== Helper Functions ==============


async def get_owned_student(db: AsyncSession, student_id: UUID, user: User) -> Student:
    student = await student_service.get_student_by_id(db, student_id, user.id)
    if not student:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found",
        )
    return student


# ============== Endpoints ==============


@router.get("/classes/{class_id}/students", response_model=StudentListResponse)
async def list_students(
    class_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
    search: str | None = Query(None, description="Search by name or student number"),
    gender: Gender | None = Query(None, description="Filter by gender"),
    is_active: bool | None = Query(True, description="Filter by active status"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=500, description="Max number of records"),
) -> StudentListResponse:
    """List the students of a class, sorted by name."""
    await get_owned_class(db, class_id, current_user)

    students, total = await student_service.get_students(
        db,
        class_id,
        is_active=is_active,
        gender=gender.value if gender else None,
        search=search,
        skip=skip,
        limit=limit,
    )

    return StudentListResponse(
        items=[StudentResponse.model_validate(s) for s in students],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.post(
    "/classes/{class_id}/students",
    response_model=StudentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_student(
    class_id: UUID,
    student_data: StudentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> StudentResponse:
    """Add a student to a class."""
    school_class = await get_owned_class(db, class_id, current_user)
    student = await student_service.create_student(db, school_class, student_data)
    return StudentResponse.model_validate(student)


@router.post(
    "/classes/{class_id}/students/bulk",
    response_model=list[StudentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_students_bulk(
    class_id: UUID,
    bulk_data: StudentBulkCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> list[StudentResponse]:
    """Add several students at once. Nothing is created if one of them is rejected."""
    school_class = await get_owned_class(db, class_id, current_user)
    students = await student_service.create_students_bulk(db, school_class, bulk_data.students)
    return [StudentResponse.model_validate(s) for s in students]


@router.post("/classes/{class_id}/students/import", response_model=StudentImportResult)
async def import_students(
    class_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
    file: UploadFile = File(..., description="PDF or plain text class list"),
    commit: bool = Query(False, description="Create the detected students"),
) -> StudentImportResult:
    """
    Detect student names in an uploaded class list.

    Without commit the detected names are only previewed.
    """
    school_class = await get_owned_class(db, class_id, current_user)

    content = await file.read()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded file is empty",
        )
    if len(content) > settings.MAX_IMPORT_SIZE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File too large. Max size: {settings.MAX_IMPORT_SIZE // (1024 * 1024)}MB",
        )

    result = await student_service.import_roster(
        db, school_class, content, file.content_type, commit=commit
    )
    result["created"] = [StudentResponse.model_validate(s) for s in result["created"]]
    return StudentImportResult(**result)


@router.get("/students/{student_id}", response_model=StudentResponse)
async def get_student(
    student_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> StudentResponse:
    student = await get_owned_student(db, student_id, current_user)
    return StudentResponse.model_validate(student)


@router.patch("/students/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: UUID,
    student_data: StudentUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> StudentResponse:
    """Update a student. Moving them requires the target class to be the teacher's."""
    student = await get_owned_student(db, student_id, current_user)
    if student_data.class_id and student_data.class_id != student.class_id:
        await get_owned_class(db, student_data.class_id, current_user)

    student = await student_service.update_student(db, student, student_data)
    return StudentResponse.model_validate(student)


@router.delete("/students/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(
    student_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> None:
    """Soft delete a student."""
    student = await get_owned_student(db, student_id, current_user)
    await student_service.deactivate_student(db, student)
