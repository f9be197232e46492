"""Subject model."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from edustats.core.database import BaseModel


class Subject(BaseModel):
    """Subject taught in a class. Its name is what average formulas refer to."""

    __tablename__ = "subjects"

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    class_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("classes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    coefficient: Mapped[Decimal] = mapped_column(
        Numeric(4, 2),
        default=Decimal("1"),
        server_default="1",
    )

    school_class: Mapped["SchoolClass"] = relationship("SchoolClass", back_populates="subjects")
    notes: Mapped[list["Note"]] = relationship(
        "Note", back_populates="subject", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Subject(id={self.id}, name={self.name})>"
