"""Trial account and payment models."""

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, LargeBinary, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from edustats.core.database import BaseModel


class CompteGratuit(BaseModel):
    """Free-trial window opened at registration."""

    __tablename__ = "compte_gratuit"

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    date_debut: Mapped[date] = mapped_column(Date, nullable=False)
    date_fin: Mapped[date] = mapped_column(Date, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        server_default="true",
    )

    user: Mapped["User"] = relationship("User", back_populates="compte_gratuit")

    def __repr__(self) -> str:
        return f"<CompteGratuit(user_id={self.user_id}, date_fin={self.date_fin})>"


class Payment(BaseModel):
    """Subscription payment proof, validated by an administrator."""

    __tablename__ = "payments"

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date_paiement: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    is_paid: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default="false",
    )
    screenshot: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    screenshot_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    montant: Mapped[int | None] = mapped_column(Integer, nullable=True)
    type_abonnement: Mapped[str | None] = mapped_column(String(20), nullable=True)
    date_debut_abonnement: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    date_fin_abonnement: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )

    user: Mapped["User"] = relationship("User", back_populates="payments")

    @property
    def has_screenshot(self) -> bool:
        return self.screenshot is not None

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, user_id={self.user_id}, is_paid={self.is_paid})>"
