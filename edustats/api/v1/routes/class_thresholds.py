"""Class threshold API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.api.v1.routes.classes import get_owned_class
from edustats.core.database import get_db
from edustats.core.deps import ActiveUser
from edustats.models.class_settings import ClassThreshold
from edustats.schemas.class_settings import (
    ClassThresholdCreate,
    ClassThresholdListResponse,
    ClassThresholdResponse,
    ClassThresholdUpdate,
)
from edustats.schemas.report import ThresholdSummary
from edustats.services import class_threshold as threshold_service

router = APIRouter(prefix="/class-thresholds", tags=["Class thresholds"])


async def get_saved_threshold(db: AsyncSession, class_id: UUID) -> ClassThreshold:
    threshold = await threshold_service.get_class_threshold(db, class_id)
    if not threshold:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No thresholds configured for this class",
        )
    return threshold


@router.get("", response_model=ClassThresholdListResponse)
async def list_thresholds(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> ClassThresholdListResponse:
    thresholds = await threshold_service.get_thresholds(db, current_user.id)
    return ClassThresholdListResponse(
        items=[ClassThresholdResponse.model_validate(t) for t in thresholds],
        total=len(thresholds),
        skip=0,
        limit=len(thresholds),
    )


@router.get("/class/{class_id}", response_model=ClassThresholdResponse)
async def get_class_threshold(
    class_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> ClassThresholdResponse:
    await get_owned_class(db, class_id, current_user)
    return ClassThresholdResponse.model_validate(await get_saved_threshold(db, class_id))


@router.get("/class/{class_id}/effective", response_model=ThresholdSummary)
async def get_effective_threshold(
    class_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> ThresholdSummary:
    """Thresholds applied to a class, defaults included."""
    await get_owned_class(db, class_id, current_user)
    thresholds = await threshold_service.get_effective_thresholds(db, class_id)
    return ThresholdSummary(
        moyenne_admission=thresholds.moyenne_admission,
        moyenne_redoublement=thresholds.moyenne_redoublement,
        max_note=thresholds.max_note,
    )


@router.post("", response_model=ClassThresholdResponse, status_code=status.HTTP_201_CREATED)
async def create_threshold(
    threshold_data: ClassThresholdCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> ClassThresholdResponse:
    await get_owned_class(db, threshold_data.class_id, current_user)
    threshold = await threshold_service.create_threshold(db, current_user.id, threshold_data)
    return ClassThresholdResponse.model_validate(threshold)


@router.put("/class/{class_id}", response_model=ClassThresholdResponse)
async def update_threshold(
    class_id: UUID,
    threshold_data: ClassThresholdUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> ClassThresholdResponse:
    await get_owned_class(db, class_id, current_user)
    threshold = await get_saved_threshold(db, class_id)
    threshold = await threshold_service.update_threshold(db, threshold, threshold_data)
    return ClassThresholdResponse.model_validate(threshold)


@router.delete("/class/{class_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_threshold(
    class_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> None:
    """Remove the class thresholds; defaults apply again."""
    await get_owned_class(db, class_id, current_user)
    await threshold_service.delete_threshold(db, await get_saved_threshold(db, class_id))
