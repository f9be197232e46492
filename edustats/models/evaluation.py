"""Evaluation model."""

import datetime as dt
from uuid import UUID

from sqlalchemy import Date, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from edustats.core.database import BaseModel


class Evaluation(BaseModel):
    """A graded session (composition) of a class during a school year."""

    __tablename__ = "evaluations"

    class_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("classes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    school_year_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("school_years.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    nom: Mapped[str] = mapped_column(String(200), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)

    school_class: Mapped["SchoolClass"] = relationship("SchoolClass", back_populates="evaluations")
    school_year: Mapped["SchoolYear"] = relationship("SchoolYear")

    def __repr__(self) -> str:
        return f"<Evaluation(id={self.id}, nom={self.nom})>"
