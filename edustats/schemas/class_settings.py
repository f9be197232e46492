"""Class average configuration and threshold schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class ClassAverageConfigCreate(BaseModel):
    """Create or replace the average configuration of a class."""

    class_id: UUID
    divisor: Decimal = Field(..., gt=0, max_digits=6, decimal_places=2)
    formula: str = Field(..., min_length=1, max_length=2000)


class ClassAverageConfigUpdate(BaseModel):
    divisor: Decimal | None = Field(None, gt=0, max_digits=6, decimal_places=2)
    formula: str | None = Field(None, min_length=1, max_length=2000)
    is_active: bool | None = None


class ClassAverageConfigResponse(BaseModel):
    """Class average configuration response."""

    id: UUID | None
    user_id: UUID
    class_id: UUID
    divisor: Decimal
    formula: str
    is_active: bool
    is_default: bool = False

    model_config = {"from_attributes": True}


class FormulaPreviewRequest(BaseModel):
    """Evaluate a formula against sample notes without saving it."""

    formula: str = Field(..., min_length=1, max_length=2000)
    notes: dict[str, Decimal]


class FormulaPreviewResponse(BaseModel):
    result: Decimal


class ClassThresholdBase(BaseModel):
    moyenne_admission: Decimal = Field(..., ge=0, max_digits=5, decimal_places=2)
    moyenne_redoublement: Decimal = Field(..., ge=0, max_digits=5, decimal_places=2)
    max_note: int = Field(20, ge=1, le=100)

    @model_validator(mode="after")
    def check_order(self):
        if self.moyenne_redoublement > self.moyenne_admission:
            raise ValueError("moyenne_redoublement cannot exceed moyenne_admission")
        if self.moyenne_admission > self.max_note:
            raise ValueError("moyenne_admission cannot exceed max_note")
        return self


class ClassThresholdCreate(ClassThresholdBase):
    """Schema for creating class thresholds."""

    class_id: UUID


class ClassThresholdUpdate(ClassThresholdBase):
    """Schema for replacing class thresholds."""


class ClassThresholdResponse(BaseModel):
    """Class threshold response schema."""

    id: UUID
    class_id: UUID
    user_id: UUID
    moyenne_admission: Decimal
    moyenne_redoublement: Decimal
    max_note: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ClassThresholdListResponse(BaseModel):
    """Paginated ClassThreshold list response."""

    items: list[ClassThresholdResponse]
    total: int
    skip: int
    limit: int


class ClassAverageConfigListResponse(BaseModel):
    """Paginated ClassAverageConfig list response."""

    items: list[ClassAverageConfigResponse]
    total: int
    skip: int
    limit: int
