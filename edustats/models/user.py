"""User model."""

from enum import Enum

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from edustats.core.database import BaseModel


class Gender(str, Enum):
    """Gender codes used on rosters and report recaps."""

    MALE = "M"
    FEMALE = "F"


class User(BaseModel):
    """Teacher account. Owns every class, subject and grade it creates."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    gender: Mapped[Gender | None] = mapped_column(String(1), nullable=True)
    establishment: Mapped[str | None] = mapped_column(String(255), nullable=True)
    direction_regionale: Mapped[str | None] = mapped_column(String(255), nullable=True)
    secteur_pedagogique: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        server_default="true",
    )

    # Relationships
    compte_gratuit: Mapped["CompteGratuit | None"] = relationship(
        "CompteGratuit", back_populates="user", uselist=False
    )
    payments: Mapped[list["Payment"]] = relationship("Payment", back_populates="user")
    school_years: Mapped[list["SchoolYear"]] = relationship("SchoolYear", back_populates="user")
    classes: Mapped[list["SchoolClass"]] = relationship("SchoolClass", back_populates="user")

    @property
    def full_name(self) -> str:
        """Return the user's full name."""
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
