"""Note API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.api.v1.routes.evaluations import get_owned_evaluation
from edustats.api.v1.routes.students import get_owned_student
from edustats.api.v1.routes.subjects import get_owned_subject
from edustats.core.database import get_db
from edustats.core.deps import ActiveUser
from edustats.models.grade import Note
from edustats.models.user import User
from edustats.schemas.grade import (
    NoteBulkUpsert,
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
)
from edustats.services import note as note_service

router = APIRouter(prefix="/notes", tags=["Notes"])


# ============== Helper Functions ==============


async def get_owned_note(db: AsyncSession, note_id: UUID, user: User) -> Note:
    note = await note_service.get_note_by_id(db, note_id, user.id)
    if not note:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Note not found",
        )
    return note


async def check_note_targets(db: AsyncSession, note_data: NoteCreate, user: User) -> UUID:
    """
    Check that student, subject and evaluation are the teacher's and share
    one class. Returns that class ID.
    """
    evaluation = await get_owned_evaluation(db, note_data.evaluation_id, user)
    student = await get_owned_student(db, note_data.student_id, user)
    subject = await get_owned_subject(db, note_data.subject_id, user)

    if student.class_id != evaluation.class_id or subject.class_id != evaluation.class_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Student, subject and evaluation must belong to the same class",
        )
    return evaluation.class_id


# ============== Endpoints ==============


@router.get("", response_model=NoteListResponse)
async def list_notes(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
    class_id: UUID | None = Query(None, description="Filter by class ID"),
    subject_id: UUID | None = Query(None, description="Filter by subject ID"),
    evaluation_id: UUID | None = Query(None, description="Filter by evaluation ID"),
    student_id: UUID | None = Query(None, description="Filter by student ID"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(500, ge=1, le=2000, description="Max number of records"),
) -> NoteListResponse:
    """List the teacher's active notes."""
    notes = await note_service.get_notes(
        db,
        current_user.id,
        class_id=class_id,
        subject_id=subject_id,
        evaluation_id=evaluation_id,
        student_id=student_id,
    )

    return NoteListResponse(
        items=[NoteResponse.model_validate(n) for n in notes[skip : skip + limit]],
        total=len(notes),
        skip=skip,
        limit=limit,
    )


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    note_data: NoteCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> NoteResponse:
    """
    Record a note.

    A note already recorded for the same student, subject and evaluation
    is replaced.
    """
    class_id = await check_note_targets(db, note_data, current_user)
    note = await note_service.upsert_note(db, current_user.id, class_id, note_data)
    return NoteResponse.model_validate(note)


@router.put("/upsert", response_model=NoteResponse)
async def upsert_note(
    note_data: NoteCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> NoteResponse:
    """Create or replace the note of a student for a subject and evaluation."""
    class_id = await check_note_targets(db, note_data, current_user)
    note = await note_service.upsert_note(db, current_user.id, class_id, note_data)
    return NoteResponse.model_validate(note)


@router.put("/bulk", response_model=list[NoteResponse])
async def bulk_upsert_notes(
    bulk_data: NoteBulkUpsert,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> list[NoteResponse]:
    """Save a grid of notes for one class in a single transaction."""
    class_ids = {await check_note_targets(db, item, current_user) for item in bulk_data.notes}
    if len(class_ids) > 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="All notes of a batch must belong to the same class",
        )

    notes = await note_service.bulk_upsert_notes(
        db, current_user.id, class_ids.pop(), bulk_data.notes
    )
    return [NoteResponse.model_validate(n) for n in notes]


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> NoteResponse:
    note = await get_owned_note(db, note_id, current_user)
    return NoteResponse.model_validate(note)


@router.patch("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: UUID,
    note_data: NoteUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> NoteResponse:
    note = await get_owned_note(db, note_id, current_user)
    evaluation = await get_owned_evaluation(db, note.evaluation_id, current_user)

    note = await note_service.update_note(db, note, evaluation.class_id, note_data)
    return NoteResponse.model_validate(note)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> None:
    """Soft delete a note."""
    note = await get_owned_note(db, note_id, current_user)
    await note_service.deactivate_note(db, note)
