"""Subject schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from edustats.schemas.validators import NonBlankStr


class SubjectCreate(BaseModel):
    """Schema for creating a subject."""

    class_id: UUID
    name: NonBlankStr = Field(..., max_length=100)
    coefficient: Decimal = Field(Decimal("1"), gt=0, le=20, decimal_places=2)


class SubjectUpdate(BaseModel):
    """Schema for updating a subject."""

    name: NonBlankStr | None = Field(None, max_length=100)
    coefficient: Decimal | None = Field(None, gt=0, le=20, decimal_places=2)


class SubjectResponse(BaseModel):
    """Subject response schema."""

    id: UUID
    user_id: UUID
    class_id: UUID
    name: str
    coefficient: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SubjectListResponse(BaseModel):
    """Paginated Subject list response."""

    items: list[SubjectResponse]
    total: int
    skip: int
    limit: int
