"""Evaluation formula model."""

from uuid import UUID

from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from edustats.core.database import BaseModel


class EvaluationFormula(BaseModel):
    """A named formula a teacher keeps to reuse across classes."""

    __tablename__ = "evaluation_formulas"

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    formula: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<EvaluationFormula(name={self.name!r}, formula={self.formula!r})>"
