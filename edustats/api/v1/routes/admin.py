"""Administrator routes: payment validation and trial monitoring."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.api.v1.routes.payments import screenshot_response
from edustats.core.config import settings
from edustats.core.database import get_db
from edustats.core.deps import CurrentAdmin
from edustats.core.security import create_admin_token
from edustats.schemas.auth import AdminLoginRequest, AdminToken
from edustats.schemas.subscription import (
    ActiveTrial,
    PaymentListResponse,
    PaymentResponse,
    PaymentStats,
    PaymentStatusUpdate,
    TrialStats,
)
from edustats.schemas.user import AdminResponse
from edustats.services import auth as auth_service
from edustats.services import compte_gratuit as trial_service
from edustats.services import payment as payment_service

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post("/login", response_model=AdminToken)
async def admin_login(
    login_data: AdminLoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AdminToken:
    """Login for platform administrators."""
    admin = await auth_service.authenticate_admin(db, login_data.username, login_data.password)
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return AdminToken(
        access_token=create_admin_token({"sub": str(admin.id), "username": admin.username}),
        expires_in=settings.ADMIN_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.get("/me", response_model=AdminResponse)
async def get_admin_profile(current_admin: CurrentAdmin) -> AdminResponse:
    return AdminResponse.model_validate(current_admin)


@router.get("/payments", response_model=PaymentListResponse)
async def list_payments(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: CurrentAdmin,
    is_paid: bool | None = Query(None, description="Filter by validation status"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(50, ge=1, le=200, description="Max number of records"),
) -> PaymentListResponse:
    """List every payment, optionally only validated or pending ones."""
    payments, total = await payment_service.get_payments(
        db, is_paid=is_paid, skip=skip, limit=limit
    )
    return PaymentListResponse(
        items=[PaymentResponse.model_validate(p) for p in payments],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.get("/payments/stats", response_model=PaymentStats)
async def get_payment_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: CurrentAdmin,
) -> PaymentStats:
    return PaymentStats(**await payment_service.get_payment_stats(db))


@router.put("/payments/{payment_id}/status", response_model=PaymentResponse)
async def set_payment_status(
    payment_id: UUID,
    status_data: PaymentStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: CurrentAdmin,
) -> PaymentResponse:
    """
    Validate or invalidate a payment.

    Validation opens a one-year subscription from now.
    """
    payment = await payment_service.get_payment_by_id(db, payment_id)
    if not payment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Payment not found",
        )

    payment = await payment_service.set_payment_status(db, payment, status_data.is_paid)
    return PaymentResponse.model_validate(payment)


@router.get("/payments/{payment_id}/screenshot")
async def get_payment_screenshot(
    payment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: CurrentAdmin,
) -> Response:
    payment = await payment_service.get_payment_by_id(db, payment_id)
    if not payment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Payment not found",
        )
    return screenshot_response(payment)


@router.get("/trials", response_model=list[ActiveTrial])
async def list_active_trials(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: CurrentAdmin,
) -> list[ActiveTrial]:
    """Trials still running, soonest to end first."""
    return [ActiveTrial(**trial) for trial in await trial_service.get_active_trials(db)]


@router.get("/trials/stats", response_model=TrialStats)
async def get_trial_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: CurrentAdmin,
) -> TrialStats:
    return TrialStats(**await trial_service.get_trial_stats(db))


@router.post("/trials/{user_id}/expire", status_code=status.HTTP_204_NO_CONTENT)
async def expire_trial(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: CurrentAdmin,
) -> None:
    """End a teacher's trial now."""
    trial = await trial_service.expire_trial(db, user_id)
    if trial is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No trial account found",
        )
