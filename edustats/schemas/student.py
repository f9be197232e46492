"""Student schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from edustats.models.user import Gender
from edustats.schemas.validators import NonBlankStr


class StudentCreate(BaseModel):
    """Schema for creating a new student."""

    name: NonBlankStr = Field(..., max_length=200)
    gender: Gender | None = None
    student_number: str | None = Field(None, max_length=50)
    birth_date: date | None = None
    school_year_id: UUID | None = None

    model_config = {"use_enum_values": True}


class StudentBulkCreate(BaseModel):
    """Several students added to a class in one request."""

    students: list[StudentCreate] = Field(..., min_length=1, max_length=200)


class StudentUpdate(BaseModel):
    """Schema for updating a student."""

    name: NonBlankStr | None = Field(None, max_length=200)
    gender: Gender | None = None
    student_number: str | None = Field(None, max_length=50)
    birth_date: date | None = None
    class_id: UUID | None = None
    is_active: bool | None = None

    model_config = {"use_enum_values": True}


class StudentResponse(BaseModel):
    """Student response schema."""

    id: UUID
    class_id: UUID
    school_year_id: UUID | None
    name: str
    gender: Gender | None
    student_number: str | None
    birth_date: date | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ParsedStudent(BaseModel):
    """A name detected in an imported document."""

    first_name: str
    last_name: str
    confidence: float
    original_text: str
    line_number: int
    birth_date: date | None = None


class ImportErrorLine(BaseModel):
    row: int
    original_text: str
    error: str


class StudentImportResult(BaseModel):
    """Outcome of a roster import."""

    total_processed: int
    success_count: int
    error_count: int
    duplicate_count: int
    students: list[ParsedStudent]
    errors: list[ImportErrorLine]
    created: list[StudentResponse] = []


class StudentListResponse(BaseModel):
    """Paginated Student list response."""

    items: list[StudentResponse]
    total: int
    skip: int
    limit: int
