"""Subject service."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.core.exceptions import ConflictError
from edustats.models.grade import Note
from edustats.models.subject import Subject
from edustats.schemas.subject import SubjectCreate, SubjectUpdate


async def get_subject_by_id(db: AsyncSession, subject_id: UUID, user_id: UUID) -> Subject | None:
    """Get one of the teacher's subjects."""
    result = await db.execute(
        select(Subject).where(Subject.id == subject_id, Subject.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def get_subjects(
    db: AsyncSession,
    user_id: UUID,
    *,
    class_id: UUID | None = None,
) -> list[Subject]:
    """Get the teacher's subjects, optionally for one class."""
    query = select(Subject).where(Subject.user_id == user_id)
    if class_id is not None:
        query = query.where(Subject.class_id == class_id)

    result = await db.execute(query.order_by(Subject.created_at, Subject.name))
    return list(result.scalars().all())


async def get_class_subjects(db: AsyncSession, class_id: UUID) -> list[Subject]:
    """Subjects of a class in creation order."""
    result = await db.execute(
        select(Subject).where(Subject.class_id == class_id).order_by(Subject.created_at, Subject.name)
    )
    return list(result.scalars().all())


async def _check_unique_name(
    db: AsyncSession, class_id: UUID, name: str, exclude_id: UUID | None = None
) -> None:
    query = select(Subject.id).where(
        Subject.class_id == class_id,
        func.lower(Subject.name) == name.lower(),
    )
    if exclude_id is not None:
        query = query.where(Subject.id != exclude_id)
    result = await db.execute(query.limit(1))
    if result.scalar_one_or_none() is not None:
        raise ConflictError(f"Subject '{name}' already exists in this class")


async def create_subject(db: AsyncSession, user_id: UUID, data: SubjectCreate) -> Subject:
    """Create a subject in a class."""
    await _check_unique_name(db, data.class_id, data.name)

    subject = Subject(
        user_id=user_id,
        class_id=data.class_id,
        name=data.name,
        coefficient=data.coefficient,
    )
    db.add(subject)
    await db.commit()
    await db.refresh(subject)

    return subject


async def update_subject(db: AsyncSession, subject: Subject, data: SubjectUpdate) -> Subject:
    """Update a subject."""
    update_data = data.model_dump(exclude_unset=True)

    if "name" in update_data:
        await _check_unique_name(db, subject.class_id, update_data["name"], exclude_id=subject.id)

    for field, value in update_data.items():
        setattr(subject, field, value)

    await db.commit()
    await db.refresh(subject)

    return subject


async def delete_subject(db: AsyncSession, subject: Subject) -> None:
    """Delete a subject that has no notes."""
    result = await db.execute(
        select(func.count())
        .select_from(Note)
        .where(Note.subject_id == subject.id, Note.is_active == True)
    )
    if result.scalar() or 0:
        raise ConflictError("Subject has notes and cannot be deleted")

    await db.delete(subject)
    await db.commit()
