"""Student service."""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.core.exceptions import ConflictError
from edustats.models.school_class import SchoolClass
from edustats.models.student import Student
from edustats.schemas.student import StudentCreate, StudentUpdate
from edustats.services import roster_import

logger = logging.getLogger(__name__)


async def get_student_by_id(db: AsyncSession, student_id: UUID, user_id: UUID) -> Student | None:
    """Get a student belonging to one of the teacher's classes."""
    result = await db.execute(
        select(Student)
        .join(SchoolClass, Student.class_id == SchoolClass.id)
        .where(Student.id == student_id, SchoolClass.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def get_students(
    db: AsyncSession,
    class_id: UUID,
    *,
    is_active: bool | None = True,
    gender: str | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 100,
) -> tuple[list[Student], int]:
    """Get the students of a class with optional filters."""
    query = select(Student).where(Student.class_id == class_id)
    count_query = select(func.count()).select_from(Student).where(Student.class_id == class_id)

    if is_active is not None:
        query = query.where(Student.is_active == is_active)
        count_query = count_query.where(Student.is_active == is_active)

    if gender is not None:
        query = query.where(Student.gender == gender)
        count_query = count_query.where(Student.gender == gender)

    if search:
        search_filter = Student.name.ilike(f"%{search}%") | Student.student_number.ilike(
            f"%{search}%"
        )
        query = query.where(search_filter)
        count_query = count_query.where(search_filter)

    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(Student.name).offset(skip).limit(limit)
    result = await db.execute(query)
    students = list(result.scalars().all())

    return students, total


async def get_active_students(db: AsyncSession, class_id: UUID) -> list[Student]:
    """All active students of a class, sorted by name."""
    result = await db.execute(
        select(Student)
        .where(Student.class_id == class_id, Student.is_active == True)
        .order_by(Student.name)
    )
    return list(result.scalars().all())


async def _taken_numbers(
    db: AsyncSession, class_id: UUID, exclude_id: UUID | None = None
) -> set[str]:
    query = select(Student.student_number).where(
        Student.class_id == class_id,
        Student.is_active == True,
        Student.student_number.is_not(None),
    )
    if exclude_id is not None:
        query = query.where(Student.id != exclude_id)
    result = await db.execute(query)
    return {number for number in result.scalars().all()}


def _build_student(school_class: SchoolClass, data: StudentCreate) -> Student:
    return Student(
        class_id=school_class.id,
        school_year_id=data.school_year_id or school_class.school_year_id,
        name=data.name,
        gender=data.gender,
        student_number=data.student_number,
        birth_date=data.birth_date,
    )


async def create_student(
    db: AsyncSession, school_class: SchoolClass, data: StudentCreate
) -> Student:
    """Create a new student in a class."""
    if data.student_number and data.student_number in await _taken_numbers(db, school_class.id):
        raise ConflictError(f"Student number {data.student_number} is already used in this class")

    student = _build_student(school_class, data)
    db.add(student)
    await db.commit()
    await db.refresh(student)

    return student


async def create_students_bulk(
    db: AsyncSession, school_class: SchoolClass, items: list[StudentCreate]
) -> list[Student]:
    """
    Create several students at once.

    Student numbers must be unique both inside the payload and among the
    class's current students; nothing is created otherwise.
    """
    taken = await _taken_numbers(db, school_class.id)
    seen: set[str] = set()
    for item in items:
        if not item.student_number:
            continue
        if item.student_number in seen:
            raise ConflictError(f"Student number {item.student_number} appears twice")
        if item.student_number in taken:
            raise ConflictError(
                f"Student number {item.student_number} is already used in this class"
            )
        seen.add(item.student_number)

    students = [_build_student(school_class, item) for item in items]
    db.add_all(students)
    await db.commit()
    for student in students:
        await db.refresh(student)

    logger.info("Added %d students to class %s", len(students), school_class.id)
    return students


async def update_student(db: AsyncSession, student: Student, data: StudentUpdate) -> Student:
    """Update a student."""
    update_data = data.model_dump(exclude_unset=True)

    class_id = update_data.get("class_id", student.class_id)
    number = update_data.get("student_number", student.student_number)
    if number and ("student_number" in update_data or "class_id" in update_data):
        if number in await _taken_numbers(db, class_id, exclude_id=student.id):
            raise ConflictError(f"Student number {number} is already used in this class")

    for field, value in update_data.items():
        setattr(student, field, value)

    await db.commit()
    await db.refresh(student)

    return student


async def deactivate_student(db: AsyncSession, student: Student) -> Student:
    """Soft delete a student by setting is_active to False."""
    student.is_active = False
    await db.commit()
    await db.refresh(student)
    return student


async def import_roster(
    db: AsyncSession,
    school_class: SchoolClass,
    content: bytes,
    content_type: str | None,
    *,
    commit: bool = False,
) -> dict:
    """
    Detect students in an uploaded class list.

    Names already on the class roster count as duplicates. With commit,
    the remaining names are created as students of the class.
    """
    text = roster_import.extract_text(content, content_type)
    parsed = roster_import.parse_student_names(text)

    existing = [student.name for student in await get_active_students(db, school_class.id)]
    fresh = [
        candidate
        for candidate in parsed.students
        if not roster_import.matches_existing(candidate, existing)
    ]
    duplicate_count = parsed.duplicate_count + len(parsed.students) - len(fresh)

    created: list[Student] = []
    if commit and fresh:
        created = await create_students_bulk(
            db,
            school_class,
            [
                StudentCreate(name=candidate.full_name, birth_date=candidate.birth_date)
                for candidate in fresh
            ],
        )

    return {
        "total_processed": parsed.total_processed,
        "success_count": len(fresh),
        "error_count": len(parsed.errors),
        "duplicate_count": duplicate_count,
        "students": [
            {
                "first_name": candidate.first_name,
                "last_name": candidate.last_name,
                "confidence": candidate.confidence,
                "original_text": candidate.original_text,
                "line_number": candidate.line_number,
                "birth_date": candidate.birth_date,
            }
            for candidate in fresh
        ],
        "errors": parsed.errors,
        "created": created,
    }
