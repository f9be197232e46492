"""Schemas for classes."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from edustats.schemas.validators import NonBlankStr


class SchoolClassCreate(BaseModel):
    """Schema for creating a new class."""

    name: NonBlankStr = Field(..., max_length=100)
    level: str | None = Field(None, max_length=50)
    school_year_id: UUID | None = None


class SchoolClassUpdate(BaseModel):
    """Schema for updating a class."""

    name: NonBlankStr | None = Field(None, max_length=100)
    level: str | None = Field(None, max_length=50)
    school_year_id: UUID | None = None


class SchoolClassResponse(BaseModel):
    """Class response schema."""

    id: UUID
    user_id: UUID
    school_year_id: UUID | None
    name: str
    level: str | None
    is_active: bool
    student_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SchoolClassListResponse(BaseModel):
    """Paginated SchoolClass list response."""

    items: list[SchoolClassResponse]
    total: int
    skip: int
    limit: int
