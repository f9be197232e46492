"""Student model."""

from datetime import date
from uuid import UUID

from sqlalchemy import Boolean, Date, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from edustats.core.database import BaseModel
from edustats.models.user import Gender


class Student(BaseModel):
    """Student enrolled in a class."""

    __tablename__ = "students"

    class_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("classes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    school_year_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("school_years.id", ondelete="SET NULL"),
        nullable=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    gender: Mapped[Gender | None] = mapped_column(String(1), nullable=True)
    student_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        server_default="true",
    )

    # Relationships
    school_class: Mapped["SchoolClass"] = relationship("SchoolClass", back_populates="students")
    notes: Mapped[list["Note"]] = relationship(
        "Note", back_populates="student", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, name={self.name})>"
