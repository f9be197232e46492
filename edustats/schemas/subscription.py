"""Trial account and payment schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel


class TrialInfo(BaseModel):
    """State of a teacher's free trial."""

    id: UUID
    date_debut: date
    date_fin: date
    is_active: bool
    created_at: datetime
    days_remaining: int
    is_expired: bool


class TrialStatus(BaseModel):
    """Whether the trial currently grants access."""

    is_trial_active: bool


class ActiveTrial(BaseModel):
    """Active trial as listed for administrators."""

    id: UUID
    user_id: UUID
    email: str
    full_name: str
    date_debut: date
    date_fin: date
    days_remaining: int


class TrialStats(BaseModel):
    total: int
    active: int
    expired: int


class PaymentResponse(BaseModel):
    """Payment response schema. The screenshot itself has its own endpoint."""

    id: UUID
    user_id: UUID
    date_paiement: datetime
    is_paid: bool
    has_screenshot: bool
    montant: int | None
    type_abonnement: str | None
    date_debut_abonnement: datetime | None
    date_fin_abonnement: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class PaymentStatusUpdate(BaseModel):
    """Administrator decision on a payment."""

    is_paid: bool


class SubscriptionStatus(BaseModel):
    """Access status of a teacher."""

    is_paid: bool
    subscription_end_date: datetime | None = None
    is_trial_active: bool
    has_access: bool


class PaymentStats(BaseModel):
    total_payments: int
    paid_payments: int
    pending_payments: int
    total_amount: int


class PaymentListResponse(BaseModel):
    """Paginated Payment list response."""

    items: list[PaymentResponse]
    total: int
    skip: int
    limit: int
