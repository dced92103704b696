# app/core/exceptions.py
from typing import Iterable, Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.shared.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class AppError(StarletteHTTPException):
    """Base class for every error the API reports to its caller"""
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "INTERNAL"
    default_detail = "Internal server error"

    def __init__(self, detail: Optional[str] = None, headers: Optional[dict] = None):
        super().__init__(
            status_code=self.http_status,
            detail=detail or self.default_detail,
            headers=headers
        )


class Unauthenticated(AppError):
    http_status = status.HTTP_401_UNAUTHORIZED
    error_code = "UNAUTHENTICATED"
    default_detail = "Authentication required"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class InvalidCredentials(AppError):
    http_status = status.HTTP_401_UNAUTHORIZED
    error_code = "INVALID_CREDENTIALS"
    default_detail = "Invalid email or password"


class InsufficientRole(AppError):
    http_status = status.HTTP_403_FORBIDDEN
    error_code = "INSUFFICIENT_ROLE"

    def __init__(self, role: str, required_roles: Iterable[str]):
        self.role = role
        self.required_roles = sorted(required_roles)
        super().__init__(
            f"Insufficient permissions. User role: {role}, "
            f"Required: {', '.join(self.required_roles)}"
        )


class Forbidden(AppError):
    http_status = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"
    default_detail = "Forbidden"


class NotFound(AppError):
    http_status = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    default_detail = "Resource not found"


class AlreadyExists(AppError):
    http_status = status.HTTP_409_CONFLICT
    error_code = "ALREADY_EXISTS"
    default_detail = "Resource already exists"


class InvalidArgument(AppError):
    http_status = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_ARGUMENT"
    default_detail = "Invalid argument"


class InvalidTransition(AppError):
    http_status = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_TRANSITION"

    def __init__(self, from_status: str, to_status: str):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Cannot change status from {from_status} to {to_status}")


class Conflict(AppError):
    http_status = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"
    default_detail = "Request conflicts with current state"


class Unassignable(Conflict):
    error_code = "UNASSIGNABLE"
    default_detail = "Order cannot be assigned"


class Internal(AppError):
    pass


def _error_response(status_code: int, message: str, error_code: str, details=None, headers=None) -> JSONResponse:
    body = ErrorResponse(message=message, error_code=error_code, details=details)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body),
        headers=headers
    )


def register_exception_handlers(app: FastAPI):
    """Render every failure as an ErrorResponse"""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        error_code = getattr(exc, "error_code", "HTTP_ERROR")
        if isinstance(exc, AppError) and exc.status_code < 500:
            logger.info(f"{request.method} {request.url.path} rejected: {error_code} - {exc.detail}")
        return _error_response(
            exc.status_code, str(exc.detail), error_code, headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error_response(
            422,
            "Validation failed",
            InvalidArgument.error_code,
            details=jsonable_encoder(exc.errors())
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception(f"❌ Database error on {request.method} {request.url.path}: {exc}")
        return _error_response(
            Internal.http_status, "Database error", Internal.error_code
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}")
        return _error_response(
            Internal.http_status, Internal.default_detail, Internal.error_code
        )
