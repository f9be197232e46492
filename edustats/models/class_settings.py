"""Per-class average configuration and pass/repeat thresholds."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from edustats.core.database import BaseModel


class ClassAverageConfig(BaseModel):
    """Formula used to turn subject notes into a moyenne."""

    __tablename__ = "class_average_configs"

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
    divisor: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False)
    formula: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="true")

    school_class: Mapped["SchoolClass"] = relationship("SchoolClass")

    def __repr__(self) -> str:
        return f"<ClassAverageConfig(class_id={self.class_id}, formula={self.formula!r})>"


class ClassThreshold(BaseModel):
    """Admission and repeat cutoffs of a class."""

    __tablename__ = "class_thresholds"

    class_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("classes.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    moyenne_admission: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    moyenne_redoublement: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    max_note: Mapped[int] = mapped_column(Integer, nullable=False, default=20)

    school_class: Mapped["SchoolClass"] = relationship("SchoolClass")

    def __repr__(self) -> str:
        return f"<ClassThreshold(class_id={self.class_id}, admission={self.moyenne_admission})>"
