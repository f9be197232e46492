"""User schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from edustats.models.user import Gender
from edustats.schemas.validators import NonBlankStr


class UserUpdateMe(BaseModel):
    """Schema for a teacher updating their own profile."""

    first_name: NonBlankStr | None = Field(None, max_length=100)
    last_name: NonBlankStr | None = Field(None, max_length=100)
    gender: Gender | None = None
    establishment: str | None = Field(None, max_length=255)
    direction_regionale: str | None = Field(None, max_length=255)
    secteur_pedagogique: str | None = Field(None, max_length=255)

    model_config = {"use_enum_values": True}


class PasswordChange(BaseModel):
    """Schema for changing password."""

    current_password: str = Field(..., min_length=6)
    new_password: str = Field(..., min_length=8, max_length=128)


class UserResponse(BaseModel):
    """User response schema."""

    id: UUID
    email: str
    first_name: str
    last_name: str
    gender: Gender | None
    establishment: str | None
    direction_regionale: str | None
    secteur_pedagogique: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AdminResponse(BaseModel):
    """Administrator response schema."""

    id: UUID
    username: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
