"""Free trial (compte gratuit) service."""

import logging
from datetime import date, timedelta
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from edustats.core.config import settings
from edustats.models.subscription import CompteGratuit

logger = logging.getLogger(__name__)


def add_trial(db: AsyncSession, user_id: UUID, start: date | None = None) -> CompteGratuit:
    """Stage a trial running TRIAL_DAYS days from start. The caller commits."""
    start = start or date.today()
    trial = CompteGratuit(
        user_id=user_id,
        date_debut=start,
        date_fin=start + timedelta(days=settings.TRIAL_DAYS),
        is_active=True,
    )
    db.add(trial)
    return trial


async def get_trial(db: AsyncSession, user_id: UUID) -> CompteGratuit | None:
    result = await db.execute(select(CompteGratuit).where(CompteGratuit.user_id == user_id))
    return result.scalar_one_or_none()


def days_remaining(trial: CompteGratuit, today: date | None = None) -> int:
    """Whole days left before the trial ends, never negative."""
    today = today or date.today()
    return max(0, (trial.date_fin - today).days)


def is_expired(trial: CompteGratuit, today: date | None = None) -> bool:
    today = today or date.today()
    return today > trial.date_fin


async def is_trial_active(db: AsyncSession, user_id: UUID) -> bool:
    """
    Check whether the teacher's trial still grants access.

    A trial found past its end date while still flagged active is
    deactivated on the spot.
    """
    trial = await get_trial(db, user_id)
    if trial is None or not trial.is_active:
        return False

    if is_expired(trial):
        trial.is_active = False
        await db.commit()
        logger.info("Trial of user %s expired on %s", user_id, trial.date_fin)
        return False

    return True


async def get_trial_info(db: AsyncSession, user_id: UUID) -> dict | None:
    """Trial details with the computed remaining days."""
    trial = await get_trial(db, user_id)
    if trial is None:
        return None

    return {
        "id": trial.id,
        "date_debut": trial.date_debut,
        "date_fin": trial.date_fin,
        "is_active": trial.is_active and not is_expired(trial),
        "created_at": trial.created_at,
        "days_remaining": days_remaining(trial),
        "is_expired": is_expired(trial),
    }


async def expire_trial(db: AsyncSession, user_id: UUID) -> CompteGratuit | None:
    """End a trial immediately."""
    trial = await get_trial(db, user_id)
    if trial is None:
        return None

    trial.is_active = False
    await db.commit()
    await db.refresh(trial)
    return trial


async def get_active_trials(db: AsyncSession) -> list[dict]:
    """Trials still running today, soonest to end first."""
    today = date.today()
    result = await db.execute(
        select(CompteGratuit)
        .options(selectinload(CompteGratuit.user))
        .where(CompteGratuit.is_active == True, CompteGratuit.date_fin >= today)
        .order_by(CompteGratuit.date_fin)
    )
    return [
        {
            "id": trial.id,
            "user_id": trial.user_id,
            "email": trial.user.email,
            "full_name": trial.user.full_name,
            "date_debut": trial.date_debut,
            "date_fin": trial.date_fin,
            "days_remaining": days_remaining(trial, today),
        }
        for trial in result.scalars().all()
    ]


async def get_trial_stats(db: AsyncSession) -> dict:
    today = date.today()
    total = (await db.execute(select(func.count()).select_from(CompteGratuit))).scalar() or 0
    active = (
        await db.execute(
            select(func.count())
            .select_from(CompteGratuit)
            .where(CompteGratuit.is_active == True, CompteGratuit.date_fin >= today)
        )
    ).scalar() or 0
    return {"total": total, "active": active, "expired": total - active}
