"""Subscription payment service."""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.core.config import settings
from edustats.core.exceptions import BusinessRuleError
from edustats.models.subscription import Payment
from edustats.services import compte_gratuit as trial_service

logger = logging.getLogger(__name__)

SUBSCRIPTION_TYPE = "annuel"


def _now() -> datetime:
    return datetime.now(timezone.utc)


async def get_payment_by_id(db: AsyncSession, payment_id: UUID) -> Payment | None:
    """Get payment by ID."""
    result = await db.execute(select(Payment).where(Payment.id == payment_id))
    return result.scalar_one_or_none()


async def get_active_subscription(
    db: AsyncSession,
    user_id: UUID,
    *,
    exclude_id: UUID | None = None,
) -> Payment | None:
    """Latest paid payment whose subscription has not ended."""
    query = select(Payment).where(
        Payment.user_id == user_id,
        Payment.is_paid == True,
        Payment.date_fin_abonnement > _now(),
    )
    if exclude_id is not None:
        query = query.where(Payment.id != exclude_id)

    result = await db.execute(query.order_by(Payment.date_fin_abonnement.desc()).limit(1))
    return result.scalar_one_or_none()


async def get_pending_payment(db: AsyncSession, user_id: UUID) -> Payment | None:
    result = await db.execute(
        select(Payment)
        .where(Payment.user_id == user_id, Payment.is_paid == False)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def create_payment(
    db: AsyncSession,
    user_id: UUID,
    screenshot: bytes | None = None,
    screenshot_type: str | None = None,
) -> Payment:
    """
    Record a payment proof awaiting administrator validation.

    Raises BusinessRuleError when the teacher already has a running
    subscription or a payment still waiting for validation.
    """
    if await get_active_subscription(db, user_id):
        raise BusinessRuleError("You already have an active subscription")

    if await get_pending_payment(db, user_id):
        raise BusinessRuleError("A payment is already awaiting validation")

    payment = Payment(
        user_id=user_id,
        date_paiement=_now(),
        is_paid=False,
        screenshot=screenshot,
        screenshot_type=screenshot_type,
    )
    db.add(payment)
    await db.commit()
    await db.refresh(payment)

    logger.info("Payment %s submitted by user %s", payment.id, user_id)
    return payment


async def get_user_payments(
    db: AsyncSession,
    user_id: UUID,
    *,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Payment], int]:
    """Get a teacher's payments, newest first."""
    return await get_payments(db, user_id=user_id, skip=skip, limit=limit)


async def get_payments(
    db: AsyncSession,
    *,
    user_id: UUID | None = None,
    is_paid: bool | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Payment], int]:
    """Get list of payments with optional filters."""
    query = select(Payment)
    count_query = select(func.count()).select_from(Payment)

    if user_id is not None:
        query = query.where(Payment.user_id == user_id)
        count_query = count_query.where(Payment.user_id == user_id)

    if is_paid is not None:
        query = query.where(Payment.is_paid == is_paid)
        count_query = count_query.where(Payment.is_paid == is_paid)

    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(Payment.date_paiement.desc()).offset(skip).limit(limit)
    result = await db.execute(query)
    payments = list(result.scalars().all())

    return payments, total


async def delete_payment(db: AsyncSession, payment: Payment) -> None:
    """Delete a payment that has not been validated yet."""
    if payment.is_paid:
        raise BusinessRuleError("A validated payment cannot be deleted")

    await db.delete(payment)
    await db.commit()


async def set_payment_status(db: AsyncSession, payment: Payment, is_paid: bool) -> Payment:
    """
    Validate or invalidate a payment.

    Validation starts a SUBSCRIPTION_DAYS subscription from now; it is
    refused when the teacher already has another running subscription.
    """
    if is_paid:
        if await get_active_subscription(db, payment.user_id, exclude_id=payment.id):
            raise BusinessRuleError("This user already has an active subscription")

        start = _now()
        payment.is_paid = True
        payment.date_debut_abonnement = start
        payment.date_fin_abonnement = start + timedelta(days=settings.SUBSCRIPTION_DAYS)
        payment.montant = settings.SUBSCRIPTION_PRICE
        payment.type_abonnement = SUBSCRIPTION_TYPE
    else:
        payment.is_paid = False
        payment.date_debut_abonnement = None
        payment.date_fin_abonnement = None
        payment.montant = None
        payment.type_abonnement = None

    await db.commit()
    await db.refresh(payment)

    logger.info("Payment %s set to is_paid=%s", payment.id, is_paid)
    return payment


async def get_subscription_status(db: AsyncSession, user_id: UUID) -> dict:
    """Whether the teacher can use the application, and why."""
    subscription = await get_active_subscription(db, user_id)
    trial_active = await trial_service.is_trial_active(db, user_id)
    return {
        "is_paid": subscription is not None,
        "subscription_end_date": subscription.date_fin_abonnement if subscription else None,
        "is_trial_active": trial_active,
        "has_access": subscription is not None or trial_active,
    }


async def get_payment_stats(db: AsyncSession) -> dict:
    total = (await db.execute(select(func.count()).select_from(Payment))).scalar() or 0
    paid = (
        await db.execute(select(func.count()).select_from(Payment).where(Payment.is_paid == True))
    ).scalar() or 0
    amount = (
        await db.execute(
            select(func.coalesce(func.sum(Payment.montant), 0)).where(Payment.is_paid == True)
        )
    ).scalar() or 0
    return {
        "total_payments": total,
        "paid_payments": paid,
        "pending_payments": total - paid,
        "total_amount": int(amount),
    }
