"""Subscription payment routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.core.config import settings
from edustats.core.database import get_db
from edustats.core.deps import CurrentUser
from edustats.models.subscription import Payment
from edustats.models.user import User
from edustats.schemas.subscription import (
    PaymentListResponse,
    PaymentResponse,
    SubscriptionStatus,
)
from edustats.services import payment as payment_service

router = APIRouter(prefix="/payments", tags=["Payments"])


# ============== Helper Functions ==============


async def read_screenshot(file: UploadFile | None) -> tuple[bytes | None, str | None]:
    """Read an uploaded payment proof, enforcing type and size."""
    if file is None:
        return None, None

    if file.content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File type not allowed. Allowed: {', '.join(settings.ALLOWED_IMAGE_TYPES)}",
        )

    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File too large. Max size: {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB",
        )

    return content, file.content_type


async def get_own_payment(db: AsyncSession, payment_id: UUID, user: User) -> Payment:
    payment = await payment_service.get_payment_by_id(db, payment_id)
    if not payment or payment.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Payment not found",
        )
    return payment


def screenshot_response(payment: Payment) -> Response:
    if payment.screenshot is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No screenshot for this payment",
        )
    return Response(
        content=payment.screenshot,
        media_type=payment.screenshot_type or "application/octet-stream",
    )


# ============== Endpoints ==============


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def create_payment(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
    screenshot: UploadFile | None = File(None),
) -> PaymentResponse:
    """Submit a payment proof for validation by an administrator."""
    content, content_type = await read_screenshot(screenshot)
    payment = await payment_service.create_payment(db, current_user.id, content, content_type)
    return PaymentResponse.model_validate(payment)


@router.get("", response_model=PaymentListResponse)
async def list_payments(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(20, ge=1, le=100, description="Max number of records"),
) -> PaymentListResponse:
    """List the teacher's payments."""
    payments, total = await payment_service.get_user_payments(
        db, current_user.id, skip=skip, limit=limit
    )
    return PaymentListResponse(
        items=[PaymentResponse.model_validate(p) for p in payments],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.get("/status", response_model=SubscriptionStatus)
async def get_subscription_status(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
) -> SubscriptionStatus:
    """Whether the teacher has access, through a subscription or the trial."""
    return SubscriptionStatus(**await payment_service.get_subscription_status(db, current_user.id))


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
) -> PaymentResponse:
    payment = await get_own_payment(db, payment_id, current_user)
    return PaymentResponse.model_validate(payment)


@router.get("/{payment_id}/screenshot")
async def get_payment_screenshot(
    payment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
) -> Response:
    """Raw payment proof with its stored content type."""
    payment = await get_own_payment(db, payment_id, current_user)
    return screenshot_response(payment)


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment(
    payment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
) -> None:
    """Withdraw a payment that has not been validated."""
    payment = await get_own_payment(db, payment_id, current_user)
    await payment_service.delete_payment(db, payment)
