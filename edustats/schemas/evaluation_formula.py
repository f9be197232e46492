"""Evaluation formula schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from edustats.schemas.validators import FormulaText, NonBlankStr


class EvaluationFormulaCreate(BaseModel):
    """Schema for saving a named formula, e.g. ``=(Maths × 2 + Français) ÷ 3``."""

    name: NonBlankStr = Field(..., max_length=100)
    formula: FormulaText


class EvaluationFormulaUpdate(BaseModel):
    name: NonBlankStr | None = Field(None, max_length=100)
    formula: FormulaText | None = None


class EvaluationFormulaResponse(BaseModel):
    """Evaluation formula response schema."""

    id: UUID
    user_id: UUID
    name: str
    formula: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EvaluationFormulaListResponse(BaseModel):
    items: list[EvaluationFormulaResponse]
    total: int
