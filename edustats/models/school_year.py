"""SchoolYear model."""

from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from edustats.core.database import BaseModel


class SchoolYear(BaseModel):
    """A teacher's school year, e.g. 2025-2026."""

    __tablename__ = "school_years"

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_year: Mapped[int] = mapped_column(Integer, nullable=False)
    end_year: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default="false",
    )

    user: Mapped["User"] = relationship("User", back_populates="school_years")

    @property
    def name(self) -> str:
        """Return the year label like '2025-2026'."""
        return f"{self.start_year}-{self.end_year}"

    def __repr__(self) -> str:
        return f"<SchoolYear(id={self.id}, name={self.name})>"
