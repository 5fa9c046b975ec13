"""
Domain exceptions and the FastAPI handlers that render them.

Every error raised by the subscription lifecycle is a QuickFixError
subclass carrying its HTTP status, so handlers stay generic.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class QuickFixError(Exception):
    """Base exception for all QuickFix errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        body: Dict[str, Any] = {
            "error": self.__class__.__name__,
            "detail": self.message,
        }
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(QuickFixError):
    """Raised when input validation fails."""
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(QuickFixError):
    """Raised when the caller is not logged in."""
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(QuickFixError):
    """Raised on wrong role, unmet account policy, or foreign resource."""
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(QuickFixError):
    """Raised when a requested resource is not found."""
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(QuickFixError):
    """Raised when a request clashes with the current state of a record."""
    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateReferenceError(ConflictError):
    """Raised when a reference code is already used by another subscription."""

    def __init__(self, reference_code: str):
        super().__init__(
            "A subscription with this reference code already exists. "
            "Please ensure it is unique, or contact support if you believe this is an error.",
            details={"reference_code": reference_code},
        )


class IllegalTransitionError(ConflictError):
    """Raised when a subscription status change is not an allowed edge."""

    def __init__(self, from_status: str, to_status: str):
        super().__init__(
            f"Invalid status transition from '{from_status}' to '{to_status}'.",
            details={"from_status": from_status, "to_status": to_status},
        )
        self.from_status = from_status
        self.to_status = to_status


class ConfigurationError(QuickFixError):
    """Raised when an operator-controlled setting is missing or invalid."""

    def __init__(self, message: str, setting: Optional[str] = None):
        details = {"setting": setting} if setting else None
        super().__init__(message, details)


class StorageError(QuickFixError):
    """Raised when the evidence storage backend fails."""


def register_exception_handlers(app: FastAPI):

    @app.exception_handler(QuickFixError)
    async def quickfix_error_handler(request: Request, exc: QuickFixError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        messages = []
        for err in exc.errors():
            location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
            messages.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "ValidationError", "detail": "; ".join(messages)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    return app
