"""Note service."""

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.core.exceptions import BusinessRuleError
from edustats.models.grade import Note
from edustats.models.student import Student
from edustats.schemas.grade import NoteCreate, NoteUpdate
from edustats.services import class_threshold as threshold_service

logger = logging.getLogger(__name__)


async def get_note_by_id(db: AsyncSession, note_id: UUID, user_id: UUID) -> Note | None:
    """Get one of the teacher's active notes."""
    result = await db.execute(
        select(Note).where(Note.id == note_id, Note.user_id == user_id, Note.is_active == True)
    )
    return result.scalar_one_or_none()


async def get_notes(
    db: AsyncSession,
    user_id: UUID,
    *,
    class_id: UUID | None = None,
    subject_id: UUID | None = None,
    evaluation_id: UUID | None = None,
    student_id: UUID | None = None,
) -> list[Note]:
    """Get the teacher's active notes with optional filters."""
    query = select(Note).where(Note.user_id == user_id, Note.is_active == True)

    if class_id is not None:
        query = query.join(Student, Note.student_id == Student.id).where(
            Student.class_id == class_id
        )
    if subject_id is not None:
        query = query.where(Note.subject_id == subject_id)
    if evaluation_id is not None:
        query = query.where(Note.evaluation_id == evaluation_id)
    if student_id is not None:
        query = query.where(Note.student_id == student_id)

    result = await db.execute(query.order_by(Note.created_at))
    return list(result.scalars().all())


async def get_evaluation_notes(db: AsyncSession, evaluation_id: UUID) -> list[Note]:
    """Active notes of an evaluation."""
    result = await db.execute(
        select(Note).where(Note.evaluation_id == evaluation_id, Note.is_active == True)
    )
    return list(result.scalars().all())


async def _find_active(
    db: AsyncSession, student_id: UUID, subject_id: UUID, evaluation_id: UUID
) -> Note | None:
    result = await db.execute(
        select(Note).where(
            Note.student_id == student_id,
            Note.subject_id == subject_id,
            Note.evaluation_id == evaluation_id,
            Note.is_active == True,
        )
    )
    return result.scalars().first()


def _checked_value(value: Decimal, is_absent: bool, max_note: int) -> Decimal:
    if is_absent:
        return Decimal("0")
    if value < 0:
        raise BusinessRuleError("A note cannot be negative")
    if value > max_note:
        raise BusinessRuleError(f"A note cannot exceed {max_note}")
    return value


async def _max_note(db: AsyncSession, class_id: UUID) -> int:
    thresholds = await threshold_service.get_effective_thresholds(db, class_id)
    return thresholds.max_note


async def _stage_upsert(
    db: AsyncSession, user_id: UUID, data: NoteCreate, max_note: int
) -> Note:
    value = _checked_value(data.value, data.is_absent, max_note)
    note = await _find_active(db, data.student_id, data.subject_id, data.evaluation_id)
    if note is None:
        note = Note(
            user_id=user_id,
            student_id=data.student_id,
            subject_id=data.subject_id,
            evaluation_id=data.evaluation_id,
            value=value,
            is_absent=data.is_absent,
        )
        db.add(note)
    else:
        note.value = value
        note.is_absent = data.is_absent
    return note


async def upsert_note(db: AsyncSession, user_id: UUID, class_id: UUID, data: NoteCreate) -> Note:
    """
    Create a note or replace the active one.

    There is at most one active note per student, subject and evaluation.
    """
    note = await _stage_upsert(db, user_id, data, await _max_note(db, class_id))
    await db.commit()
    await db.refresh(note)
    return note


async def bulk_upsert_notes(
    db: AsyncSession, user_id: UUID, class_id: UUID, items: list[NoteCreate]
) -> list[Note]:
    """Upsert a whole grid of notes in one transaction."""
    max_note = await _max_note(db, class_id)
    notes = []
    for item in items:
        notes.append(await _stage_upsert(db, user_id, item, max_note))
        await db.flush()

    await db.commit()
    for note in notes:
        await db.refresh(note)

    logger.info("Saved %d notes for class %s", len(notes), class_id)
    return notes


async def update_note(db: AsyncSession, note: Note, class_id: UUID, data: NoteUpdate) -> Note:
    """Update a note."""
    update_data = data.model_dump(exclude_unset=True)
    is_absent = update_data.get("is_absent", note.is_absent)
    value = update_data.get("value", note.value)

    note.value = _checked_value(Decimal(value), is_absent, await _max_note(db, class_id))
    note.is_absent = is_absent

    await db.commit()
    await db.refresh(note)

    return note


async def deactivate_note(db: AsyncSession, note: Note) -> None:
    """Soft delete a note."""
    note.is_active = False
    await db.commit()
