"""Authentication routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Cookie, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.core.config import settings
from edustats.core.database import get_db
from edustats.core.deps import CurrentUser
from edustats.core.security import decode_refresh_token
from edustats.models.user import User
from edustats.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    Token,
)
from edustats.schemas.user import UserResponse
from edustats.services import auth as auth_service
from edustats.services import user as user_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


# ============== Helper Functions ==============


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    """Store the refresh token in an HttpOnly cookie."""
    response.set_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        value=refresh_token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.REFRESH_COOKIE_SECURE,
        samesite=settings.REFRESH_COOKIE_SAMESITE,
        path=f"{settings.API_V1_PREFIX}/auth",
    )


def check_login(user: User | None) -> User:
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user",
        )

    return user


def auth_response(response: Response, user: User) -> AuthResponse:
    tokens = auth_service.issue_tokens(user)
    set_refresh_cookie(response, tokens["refresh_token"])
    return AuthResponse(**tokens, user=UserResponse.model_validate(user))


# ============== Endpoints ==============


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    register_data: RegisterRequest,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthResponse:
    """Create a teacher account. A free trial starts immediately."""
    user = await auth_service.register_user(db, register_data)
    return auth_response(response, user)


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: LoginRequest,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthResponse:
    """Login with email and password."""
    user = await auth_service.authenticate_user(db, login_data.email, login_data.password)
    return auth_response(response, check_login(user))


@router.post("/login/form", response_model=Token)
async def login_form(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Token:
    """Login with OAuth2 form (for Swagger UI). Username = email."""
    user = check_login(await auth_service.authenticate_user(db, form_data.username, form_data.password))
    tokens = auth_service.issue_tokens(user)
    set_refresh_cookie(response, tokens["refresh_token"])
    return Token(**tokens)


@router.post("/refresh", response_model=Token)
async def refresh_tokens(
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    refresh_data: RefreshRequest | None = None,
    refresh_cookie: Annotated[str | None, Cookie(alias=settings.REFRESH_COOKIE_NAME)] = None,
) -> Token:
    """
    Get a new token pair.

    The refresh token is read from the body, or from the HttpOnly cookie
    when the body does not carry one.
    """
    token = (refresh_data.refresh_token if refresh_data else None) or refresh_cookie
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid refresh token",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not token:
        raise credentials_exception

    payload = decode_refresh_token(token)
    if payload is None:
        raise credentials_exception

    try:
        user_id = UUID(payload.get("sub", ""))
    except ValueError:
        raise credentials_exception

    user = await user_service.get_user_by_id(db, user_id)
    if user is None or not user.is_active:
        raise credentials_exception

    tokens = auth_service.issue_tokens(user)
    set_refresh_cookie(response, tokens["refresh_token"])
    return Token(**tokens)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response) -> None:
    """Forget the refresh cookie."""
    response.delete_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        path=f"{settings.API_V1_PREFIX}/auth",
    )


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: CurrentUser) -> UserResponse:
    """Get the authenticated teacher."""
    return UserResponse.model_validate(current_user)

