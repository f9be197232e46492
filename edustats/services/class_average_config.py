"""Class average configuration service."""

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.models.class_settings import ClassAverageConfig
from edustats.models.school_class import SchoolClass
from edustats.schemas.class_settings import ClassAverageConfigCreate, ClassAverageConfigUpdate
from edustats.services import formula as formula_service
from edustats.services import subject as subject_service

logger = logging.getLogger(__name__)


async def get_configs(db: AsyncSession, user_id: UUID) -> list[ClassAverageConfig]:
    """Active configurations of a teacher."""
    result = await db.execute(
        select(ClassAverageConfig)
        .where(ClassAverageConfig.user_id == user_id, ClassAverageConfig.is_active == True)
        .order_by(ClassAverageConfig.created_at)
    )
    return list(result.scalars().all())


async def get_config_by_id(
    db: AsyncSession, config_id: UUID, user_id: UUID
) -> ClassAverageConfig | None:
    result = await db.execute(
        select(ClassAverageConfig).where(
            ClassAverageConfig.id == config_id,
            ClassAverageConfig.user_id == user_id,
            ClassAverageConfig.is_active == True,
        )
    )
    return result.scalar_one_or_none()


async def get_class_config(
    db: AsyncSession, class_id: UUID, user_id: UUID
) -> ClassAverageConfig | None:
    """The configuration in force for a class, if the teacher saved one."""
    result = await db.execute(
        select(ClassAverageConfig)
        .where(
            ClassAverageConfig.class_id == class_id,
            ClassAverageConfig.user_id == user_id,
            ClassAverageConfig.is_active == True,
        )
        .order_by(ClassAverageConfig.updated_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_effective_config(db: AsyncSession, school_class: SchoolClass) -> dict:
    """
    Configuration used to compute moyennes for a class.

    Falls back to the plain mean of the class's subjects when the teacher
    has not saved a formula.
    """
    config = await get_class_config(db, school_class.id, school_class.user_id)
    if config is not None:
        return {
            "id": config.id,
            "user_id": config.user_id,
            "class_id": config.class_id,
            "divisor": config.divisor,
            "formula": config.formula,
            "is_active": config.is_active,
            "is_default": False,
        }

    subjects = await subject_service.get_class_subjects(db, school_class.id)
    names = [subject.name for subject in subjects]
    return {
        "id": None,
        "user_id": school_class.user_id,
        "class_id": school_class.id,
        "divisor": Decimal(len(names)),
        "formula": formula_service.default_formula(names),
        "is_active": True,
        "is_default": True,
    }


async def _validate(db: AsyncSession, class_id: UUID, formula: str) -> None:
    subjects = await subject_service.get_class_subjects(db, class_id)
    formula_service.validate_formula(formula, [subject.name for subject in subjects])


async def create_or_update_config(
    db: AsyncSession, user_id: UUID, data: ClassAverageConfigCreate
) -> ClassAverageConfig:
    """Save the formula of a class, replacing the active one if any."""
    await _validate(db, data.class_id, data.formula)

    config = await get_class_config(db, data.class_id, user_id)
    if config is None:
        config = ClassAverageConfig(
            user_id=user_id,
            class_id=data.class_id,
            divisor=data.divisor,
            formula=data.formula,
        )
        db.add(config)
    else:
        config.divisor = data.divisor
        config.formula = data.formula

    await db.commit()
    await db.refresh(config)

    logger.info("Average formula of class %s set to %r", data.class_id, data.formula)
    return config


async def update_config(
    db: AsyncSession, config: ClassAverageConfig, data: ClassAverageConfigUpdate
) -> ClassAverageConfig:
    update_data = data.model_dump(exclude_unset=True)

    if "formula" in update_data:
        await _validate(db, config.class_id, update_data["formula"])

    for field, value in update_data.items():
        setattr(config, field, value)

    await db.commit()
    await db.refresh(config)

    return config


async def deactivate_config(db: AsyncSession, config: ClassAverageConfig) -> None:
    """Soft delete; the class falls back to the default formula."""
    config.is_active = False
    await db.commit()
