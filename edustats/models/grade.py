"""Note and Moyenne models."""

import datetime as dt
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, Date, ForeignKey, Numeric, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from edustats.core.database import BaseModel


class Note(BaseModel):
    """A student's note in one subject for one evaluation."""

    __tablename__ = "notes"

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    student_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    subject_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("subjects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    evaluation_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("evaluations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    value: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    is_absent: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="true")

    student: Mapped["Student"] = relationship("Student", back_populates="notes")
    subject: Mapped["Subject"] = relationship("Subject", back_populates="notes")

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, value={self.value})>"


class Moyenne(BaseModel):
    """Stored average of a student for an evaluation."""

    __tablename__ = "moyennes"

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    student_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    evaluation_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("evaluations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    moyenne: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="true")

    student: Mapped["Student"] = relationship("Student")
    evaluation: Mapped["Evaluation"] = relationship("Evaluation")

    def __repr__(self) -> str:
        return f"<Moyenne(id={self.id}, moyenne={self.moyenne})>"
