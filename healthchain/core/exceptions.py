"""
Application Exception Handling

Single AppException class for all portal errors with FastAPI integration.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class AppException(Exception):
    """
    Unified application exception for all error scenarios.

    Provides consistent error response format across the entire API.

    Usage:
        raise AppException("Backend offline", "BACKEND_UNAVAILABLE", 502)
        raise AppException("Unknown form", "INVALID_FORM_TYPE", 400, {"form_type": "x"})

    Error Codes:
        Input:
            - INVALID_IDENTIFIER (400)
            - IDENTIFIER_REQUIRED (400)
            - INVALID_FORM_TYPE (400)
            - INVALID_FRAME (400)

        Backend:
            - BACKEND_ERROR (400)
            - BACKEND_UNAVAILABLE (502)

        General:
            - VALIDATION_ERROR (422)
            - INTERNAL_ERROR (500)
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "INVALID_IDENTIFIER")
            status_code: HTTP status code (default: 400)
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict = {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp
            }
        }

        if self.details:
            error_dict["error"]["details"] = self.details

        return error_dict


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    FastAPI exception handler for AppException.

    Converts AppException to consistent JSON error response.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Convert request validation failures to the AppException format."""
    error = validation_error(exc.errors())
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_dict()
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def invalid_identifier(identifier: Optional[str] = None) -> AppException:
    """Create invalid identifier exception."""
    details = {"identifier": identifier} if identifier else {}
    return AppException(
        "Please enter a valid 12-digit Aadhaar number",
        "INVALID_IDENTIFIER",
        400,
        details
    )


def identifier_required(message: str = "Please enter Aadhaar number") -> AppException:
    """Create missing identifier exception."""
    return AppException(message, "IDENTIFIER_REQUIRED", 400)


def invalid_form_type(form_type: str) -> AppException:
    """Create unknown form type exception."""
    return AppException(
        f"Unknown form type: {form_type}",
        "INVALID_FORM_TYPE",
        400,
        {"form_type": form_type}
    )


def invalid_frame() -> AppException:
    """Create undecodable frame exception."""
    return AppException("Frame could not be decoded as an image", "INVALID_FRAME", 400)


def backend_error(message: str) -> AppException:
    """Create exception for an error reported by the backend payload."""
    return AppException(message, "BACKEND_ERROR", 400)


def backend_unavailable(reason: str) -> AppException:
    """Create backend unreachable exception."""
    return AppException(
        reason,
        "BACKEND_UNAVAILABLE",
        502,
        {"reason": reason}
    )


def validation_error(errors) -> AppException:
    """Create request validation exception from pydantic errors."""
    fields = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", "Invalid value"),
        }
        for error in errors
    ]
    return AppException(
        "Request validation failed",
        "VALIDATION_ERROR",
        422,
        {"errors": fields}
    )


def internal_error(message: str = "Internal server error") -> AppException:
    """Create internal server error exception."""
    return AppException(message, "INTERNAL_ERROR", 500)
