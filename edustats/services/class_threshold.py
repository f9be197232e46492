"""Class threshold service."""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.core.exceptions import ConflictError
from edustats.models.class_settings import ClassThreshold
from edustats.schemas.class_settings import ClassThresholdCreate, ClassThresholdUpdate


@dataclass(frozen=True)
class Thresholds:
    """Cutoffs applied to a class."""

    moyenne_admission: Decimal = Decimal("10")
    moyenne_redoublement: Decimal = Decimal("8.5")
    max_note: int = 20


DEFAULT_THRESHOLDS = Thresholds()


async def get_thresholds(db: AsyncSession, user_id: UUID) -> list[ClassThreshold]:
    result = await db.execute(
        select(ClassThreshold)
        .where(ClassThreshold.user_id == user_id)
        .order_by(ClassThreshold.created_at)
    )
    return list(result.scalars().all())


async def get_class_threshold(db: AsyncSession, class_id: UUID) -> ClassThreshold | None:
    """Get the threshold row of a class."""
    result = await db.execute(select(ClassThreshold).where(ClassThreshold.class_id == class_id))
    return result.scalar_one_or_none()


async def get_effective_thresholds(db: AsyncSession, class_id: UUID) -> Thresholds:
    """Saved thresholds of a class, or the defaults."""
    threshold = await get_class_threshold(db, class_id)
    if threshold is None:
        return DEFAULT_THRESHOLDS
    return Thresholds(
        moyenne_admission=Decimal(threshold.moyenne_admission),
        moyenne_redoublement=Decimal(threshold.moyenne_redoublement),
        max_note=threshold.max_note,
    )


async def create_threshold(
    db: AsyncSession, user_id: UUID, data: ClassThresholdCreate
) -> ClassThreshold:
    """Create thresholds for a class that has none yet."""
    if await get_class_threshold(db, data.class_id):
        raise ConflictError("Thresholds already exist for this class")

    threshold = ClassThreshold(
        class_id=data.class_id,
        user_id=user_id,
        moyenne_admission=data.moyenne_admission,
        moyenne_redoublement=data.moyenne_redoublement,
        max_note=data.max_note,
    )
    db.add(threshold)
    await db.commit()
    await db.refresh(threshold)

    return threshold


async def update_threshold(
    db: AsyncSession, threshold: ClassThreshold, data: ClassThresholdUpdate
) -> ClassThreshold:
    for field, value in data.model_dump().items():
        setattr(threshold, field, value)

    await db.commit()
    await db.refresh(threshold)

    return threshold


async def delete_threshold(db: AsyncSession, threshold: ClassThreshold) -> None:
    await db.delete(threshold)
    await db.commit()
