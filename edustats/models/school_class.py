"""SchoolClass model."""

from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from edustats.core.database import BaseModel


class SchoolClass(BaseModel):
    """A class taught by a teacher (CP1, CE2, ...)."""

    __tablename__ = "classes"

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    school_year_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("school_years.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    level: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="true")

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="classes")
    school_year: Mapped["SchoolYear | None"] = relationship("SchoolYear")
    students: Mapped[list["Student"]] = relationship("Student", back_populates="school_class")
    subjects: Mapped[list["Subject"]] = relationship("Subject", back_populates="school_class")
    evaluations: Mapped[list["Evaluation"]] = relationship(
        "Evaluation", back_populates="school_class"
    )

    def __repr__(self) -> str:
        return f"<SchoolClass(id={self.id}, name={self.name})>"
