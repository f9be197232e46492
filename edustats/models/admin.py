"""Platform administrator model."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from edustats.core.database import BaseModel


class Admin(BaseModel):
    """Administrator validating payments and watching trial accounts."""

    __tablename__ = "admins"

    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        server_default="true",
    )

    def __repr__(self) -> str:
        return f"<Admin(id={self.id}, username={self.username})>"
