"""Note and moyenne schemas."""

import datetime as dt
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from edustats.schemas.validators import NoteValue


class NoteCreate(BaseModel):
    """Schema for creating or upserting a note."""

    student_id: UUID
    subject_id: UUID
    evaluation_id: UUID
    value: NoteValue = Decimal("0")
    is_absent: bool = False


class NoteBulkUpsert(BaseModel):
    notes: list[NoteCreate] = Field(..., min_length=1, max_length=2000)


class NoteUpdate(BaseModel):
    """Schema for updating a note."""

    value: NoteValue | None = None
    is_absent: bool | None = None


class NoteResponse(BaseModel):
    """Note response schema."""

    id: UUID
    user_id: UUID
    student_id: UUID
    subject_id: UUID
    evaluation_id: UUID
    value: Decimal
    is_absent: bool
    is_active: bool
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


class MoyenneCreate(BaseModel):
    """Schema for storing a moyenne."""

    student_id: UUID
    evaluation_id: UUID
    moyenne: Decimal = Field(..., ge=0, max_digits=5, decimal_places=2)
    date: dt.date | None = None


class MoyenneBulkUpsert(BaseModel):
    moyennes: list[MoyenneCreate] = Field(..., min_length=1, max_length=1000)


class MoyenneResponse(BaseModel):
    """Moyenne response schema."""

    id: UUID
    user_id: UUID
    student_id: UUID
    evaluation_id: UUID
    moyenne: Decimal
    date: dt.date
    is_active: bool
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


class CalculatedMoyenne(BaseModel):
    """A moyenne computed from notes, with its rank."""

    student_id: UUID
    student_name: str
    moyenne: Decimal
    rank: int


class MoyenneCalculationResult(BaseModel):
    evaluation_id: UUID
    formula: str
    items: list[CalculatedMoyenne]


class NoteListResponse(BaseModel):
    """Paginated Note list response."""

    items: list[NoteResponse]
    total: int
    skip: int
    limit: int


class MoyenneListResponse(BaseModel):
    """Paginated Moyenne list response."""

    items: list[MoyenneResponse]
    total: int
    skip: int
    limit: int
