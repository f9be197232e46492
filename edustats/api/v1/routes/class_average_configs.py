"""Class average configuration API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.api.v1.routes.classes import get_owned_class
from edustats.core.database import get_db
from edustats.core.deps import ActiveUser
from edustats.models.class_settings import ClassAverageConfig
from edustats.models.user import User
from edustats.schemas.class_settings import (
    ClassAverageConfigCreate,
    ClassAverageConfigListResponse,
    ClassAverageConfigResponse,
    ClassAverageConfigUpdate,
    FormulaPreviewRequest,
    FormulaPreviewResponse,
)
from edustats.services import class_average_config as config_service
from edustats.services import formula as formula_service

router = APIRouter(prefix="/class-average-configs", tags=["Class average configs"])


async def get_owned_config(db: AsyncSession, config_id: UUID, user: User) -> ClassAverageConfig:
    config = await config_service.get_config_by_id(db, config_id, user.id)
    if not config:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Average configuration not found",
        )
    return config


@router.get("", response_model=ClassAverageConfigListResponse)
async def list_configs(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> ClassAverageConfigListResponse:
    """Saved formulas of the teacher's classes."""
    configs = await config_service.get_configs(db, current_user.id)
    return ClassAverageConfigListResponse(
        items=[ClassAverageConfigResponse.model_validate(c) for c in configs],
        total=len(configs),
        skip=0,
        limit=len(configs),
    )


@router.get("/class/{class_id}", response_model=ClassAverageConfigResponse)
async def get_class_config(
    class_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> ClassAverageConfigResponse:
    """
    Formula used for a class.

    When the teacher has not saved one, the plain mean of the class's
    subjects is returned with is_default set.
    """
    school_class = await get_owned_class(db, class_id, current_user)
    return ClassAverageConfigResponse(**await config_service.get_effective_config(db, school_class))


@router.post("", response_model=ClassAverageConfigResponse)
async def create_or_update_config(
    config_data: ClassAverageConfigCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> ClassAverageConfigResponse:
    """Save the formula of a class. The formula may only use the class's subject names."""
    await get_owned_class(db, config_data.class_id, current_user)
    config = await config_service.create_or_update_config(db, current_user.id, config_data)
    return ClassAverageConfigResponse.model_validate(config)


@router.post("/preview", response_model=FormulaPreviewResponse)
async def preview_formula(
    preview_data: FormulaPreviewRequest,
    current_user: ActiveUser,
) -> FormulaPreviewResponse:
    """Evaluate a formula against sample notes keyed by subject name."""
    return FormulaPreviewResponse(
        result=formula_service.evaluate(preview_data.formula, preview_data.notes)
    )


@router.patch("/{config_id}", response_model=ClassAverageConfigResponse)
async def update_config(
    config_id: UUID,
    config_data: ClassAverageConfigUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> ClassAverageConfigResponse:
    config = await get_owned_config(db, config_id, current_user)
    config = await config_service.update_config(db, config, config_data)
    return ClassAverageConfigResponse.model_validate(config)


@router.delete("/{config_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_config(
    config_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> None:
    """Drop a saved formula; the class goes back to the default one."""
    config = await get_owned_config(db, config_id, current_user)
    await config_service.deactivate_config(db, config)
