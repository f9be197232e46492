"""Free trial routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.core.database import get_db
from edustats.core.deps import CurrentUser
from edustats.schemas.subscription import TrialInfo, TrialStatus
from edustats.services import compte_gratuit as trial_service

router = APIRouter(prefix="/trial", tags=["Free trial"])


@router.get("/info", response_model=TrialInfo)
async def get_trial_info(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
) -> TrialInfo:
    """Dates and remaining days of the teacher's trial."""
    info = await trial_service.get_trial_info(db, current_user.id)
    if info is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No trial account found",
        )
    return TrialInfo(**info)


@router.get("/status", response_model=TrialStatus)
async def get_trial_status(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
) -> TrialStatus:
    """Whether the trial still grants access."""
    return TrialStatus(is_trial_active=await trial_service.is_trial_active(db, current_user.id))
