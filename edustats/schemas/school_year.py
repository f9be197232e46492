"""School year schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class SchoolYearCreate(BaseModel):
    """Schema for creating a school year."""

    start_year: int = Field(..., ge=2000, le=2100)
    end_year: int = Field(..., ge=2001, le=2101)

    @model_validator(mode="after")
    def check_consecutive(self) -> "SchoolYearCreate":
        if self.end_year != self.start_year + 1:
            raise ValueError("end_year must follow start_year")
        return self


class SchoolYearUpdate(BaseModel):
    """Schema for updating a school year."""

    start_year: int | None = Field(None, ge=2000, le=2100)
    end_year: int | None = Field(None, ge=2001, le=2101)
    is_active: bool | None = None

    @model_validator(mode="after")
    def check_consecutive(self) -> "SchoolYearUpdate":
        if (self.start_year is None) != (self.end_year is None):
            raise ValueError("start_year and end_year must be changed together")
        if self.start_year is not None and self.end_year != self.start_year + 1:
            raise ValueError("end_year must follow start_year")
        return self


class SchoolYearResponse(BaseModel):
    """School year response schema."""

    id: UUID
    user_id: UUID
    start_year: int
    end_year: int
    name: str  # Computed property like "2025-2026"
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SchoolYearListResponse(BaseModel):
    """Paginated SchoolYear list response."""

    items: list[SchoolYearResponse]
    total: int
    skip: int
    limit: int
