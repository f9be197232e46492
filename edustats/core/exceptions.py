"""Domain errors raised by services and translated by routes."""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class EduStatsError(ValueError):
    """Base class for business errors."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class BusinessRuleError(EduStatsError):
    """A request that breaks a business rule."""


class ConflictError(EduStatsError):
    """A resource that already exists or is still referenced."""

    status_code = status.HTTP_409_CONFLICT


class FormulaError(EduStatsError):
    """An average formula that cannot be evaluated."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


async def edustats_exception_handler(request: Request, exc: EduStatsError) -> JSONResponse:
    """Answer business errors with their status and message."""
    logger.info("%s on %s: %s", exc.__class__.__name__, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors and hide their details from the client."""
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )
