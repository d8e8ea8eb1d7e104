# =============================================================================
# app/exceptions.py - API Error Taxonomy and Handlers
# =============================================================================
# Centralized exception handling for the API.
#
# Every failure response has the same shape:
#   {"error": "<human message>", "code": "<MACHINE_CODE>", "details": ...}
# "details" is only present when there is something to add.
# =============================================================================

from enum import Enum
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class CatalogException(Exception):
    """
    Base exception for the catalog API.

    All custom exceptions inherit from this class.
    Provides structured error responses with a stable machine code.
    """

    def __init__(
        self,
        message: str,
        code: str = "CATALOG_ERROR",
        status_code: int = 500,
        details: Any = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        self.headers = headers

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result: dict[str, Any] = {
            "error": self.message,
            "code": self.code,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Validation (400)
# =============================================================================

class ValidationKind(str, Enum):
    """Reasons a product payload is rejected. The value is the API code."""

    MISSING_NAME = "MISSING_NAME"
    MISSING_CATEGORY = "MISSING_CATEGORY"
    MISSING_UNIT_TYPE = "MISSING_UNIT_TYPE"
    INVALID_UNIT_PRICE = "INVALID_UNIT_PRICE"
    INVALID_UNIT_TYPE = "INVALID_UNIT_TYPE"
    INVALID_NUMBER = "INVALID_NUMBER"
    PRICE_OVERFLOW = "PRICE_OVERFLOW"
    STOCK_OVERFLOW = "STOCK_OVERFLOW"
    # Rejected by the database rather than by the validator
    INVALID_CATEGORY = "INVALID_CATEGORY"
    NUMERIC_OVERFLOW = "NUMERIC_OVERFLOW"


class ValidationError(CatalogException):
    """Raised when a request payload fails a client-fixable rule."""

    def __init__(self, kind: ValidationKind, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code=kind.value,
            status_code=400,
        )
        self.kind = kind
        self.field = field


# =============================================================================
# Conflict (409) / Not Found (404)
# =============================================================================

class ConflictError(CatalogException):
    """Raised when a write collides with existing data."""

    def __init__(self, message: str, code: str):
        super().__init__(message=message, code=code, status_code=409)


class NotFoundError(CatalogException):
    """Raised when the requested row doesn't exist."""

    def __init__(self, message: str = "Product not found", resource_id: str | None = None):
        super().__init__(message=message, code="NOT_FOUND", status_code=404)
        self.resource_id = resource_id


# =============================================================================
# Authentication (401 / 403)
# =============================================================================

class AuthError(CatalogException):
    """
    Raised by the authentication guard.

    401 when no token was sent, 403 when a token was sent but rejected.
    """

    def __init__(self, message: str, status_code: int = 403, code: str = "INVALID_TOKEN"):
        super().__init__(
            message=message,
            code=code,
            status_code=status_code,
            headers={"WWW-Authenticate": "Bearer"} if status_code == 401 else None,
        )


class MissingTokenError(AuthError):
    """Raised when the Authorization header carries no bearer token."""

    def __init__(self):
        super().__init__("Access token required", status_code=401, code="TOKEN_REQUIRED")


# =============================================================================
# Upstream (500)
# =============================================================================

class UpstreamError(CatalogException):
    """
    Raised when a downstream call fails for a reason the client can't fix.

    `details` carries the vendor message as an opaque diagnostic string.
    """

    def __init__(self, message: str, details: str | None = None, code: str = "UPSTREAM_ERROR"):
        super().__init__(message=message, code=code, status_code=500, details=details)


# =============================================================================
# Upload Exceptions
# =============================================================================

class NoFileError(CatalogException):
    """Raised when an upload request has no file attached."""

    def __init__(self):
        super().__init__(
            message="No image file provided",
            code="NO_FILE",
            status_code=400,
        )


class InvalidFileTypeError(CatalogException):
    """Raised when the uploaded file is not an image."""

    def __init__(self, content_type: str | None):
        super().__init__(
            message="Invalid file type",
            code="INVALID_FILE_TYPE",
            status_code=400,
            details="Only image files are allowed",
        )
        self.content_type = content_type


class FileTooLargeError(CatalogException):
    """Raised when the uploaded file exceeds the size limit."""

    def __init__(self, max_mb: int):
        super().__init__(
            message="File too large",
            code="FILE_TOO_LARGE",
            status_code=400,
            details=f"Image must be smaller than {max_mb}MB",
        )
        self.max_mb = max_mb


class StorageUploadError(UpstreamError):
    """Raised when the object store rejects or can't be reached for an upload."""

    def __init__(self, error: str):
        super().__init__(
            message="Failed to upload image",
            details=error,
            code="UPLOAD_ERROR",
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def catalog_exception_handler(
    request: Request,
    exc: CatalogException
) -> JSONResponse:
    """
    Convert CatalogException to JSON response.

    Returns structured error with:
    - error: Human-readable message
    - code: Machine-readable error code
    - details: Additional context (only when present)
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers,
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle FastAPI request validation errors (bad query, path or body).
    """
    problems = [
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request",
            "code": "INVALID_REQUEST",
            "details": "; ".join(problems),
        }
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Keep framework-raised HTTP errors (404 route, 405) in the same shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )
