"""Evaluation schemas."""

import datetime as dt
from uuid import UUID

from pydantic import BaseModel, Field

from edustats.schemas.validators import NonBlankStr


class EvaluationCreate(BaseModel):
    """Schema for creating an evaluation."""

    class_id: UUID
    school_year_id: UUID
    nom: NonBlankStr = Field(..., min_length=2, max_length=200)
    date: dt.date


class EvaluationUpdate(BaseModel):
    """Schema for updating an evaluation."""

    nom: NonBlankStr | None = Field(None, min_length=2, max_length=200)
    date: dt.date | None = None
    school_year_id: UUID | None = None


class EvaluationResponse(BaseModel):
    """Evaluation response schema."""

    id: UUID
    class_id: UUID
    school_year_id: UUID
    nom: str
    date: dt.date
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


class EvaluationListResponse(BaseModel):
    """Paginated Evaluation list response."""

    items: list[EvaluationResponse]
    total: int
    skip: int
    limit: int
