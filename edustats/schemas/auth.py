"""Authentication schemas."""

from pydantic import BaseModel, Field

from edustats.models.user import Gender
from edustats.schemas.user import UserResponse
from edustats.schemas.validators import Email, NonBlankStr


class Token(BaseModel):
    """JWT token response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class AuthResponse(Token):
    """Tokens plus the authenticated teacher."""

    user: UserResponse


class RefreshRequest(BaseModel):
    """Refresh token request. The cookie is used when the body is empty."""

    refresh_token: str | None = None


class LoginRequest(BaseModel):
    """Login request schema."""

    email: Email
    password: str = Field(..., min_length=6)


class RegisterRequest(BaseModel):
    """Teacher registration."""

    email: Email
    password: str = Field(..., min_length=8, max_length=128)
    first_name: NonBlankStr = Field(..., max_length=100)
    last_name: NonBlankStr = Field(..., max_length=100)
    gender: Gender | None = None
    establishment: str | None = Field(None, max_length=255)
    direction_regionale: str | None = Field(None, max_length=255)
    secteur_pedagogique: str | None = Field(None, max_length=255)

    model_config = {"use_enum_values": True}


class AdminLoginRequest(BaseModel):
    """Administrator login."""

    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6)


class AdminToken(BaseModel):
    """Administrator token response."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
