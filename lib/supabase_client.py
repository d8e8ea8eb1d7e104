# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module owns the process-wide Supabase client and the boundary where
# PostgREST failures become structured errors.
#
# - SupabaseClient: explicit, one-time initialization at startup
# - PersistenceError: what every repository raises on failure
# - classify_api_error(): PostgREST APIError -> PersistenceError
#
# Postgres detail text is parsed HERE and nowhere else. Callers only look at
# the structured fields (kind, column, table).
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   SupabaseClient.initialize()          # once, in the app lifespan
#   client = SupabaseClient.get_client()
# =============================================================================

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from postgrest.exceptions import APIError
from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Structured Gateway Errors
# =============================================================================

class ViolationKind(str, Enum):
    """
    Failure categories the persistence gateway reports.

    Mapped from Postgres SQLSTATE codes and PostgREST's own codes.
    """
    UNIQUE_VIOLATION = "unique_violation"
    FOREIGN_KEY_VIOLATION = "foreign_key_violation"
    NUMERIC_OVERFLOW = "numeric_overflow"
    NO_ROWS = "no_rows"
    OTHER = "other"


# SQLSTATE / PostgREST code -> violation kind
_CODE_KINDS: dict[str, ViolationKind] = {
    "23505": ViolationKind.UNIQUE_VIOLATION,
    "23503": ViolationKind.FOREIGN_KEY_VIOLATION,
    "22003": ViolationKind.NUMERIC_OVERFLOW,
    "PGRST116": ViolationKind.NO_ROWS,
}

# Key (barcode)=(123) already exists.
_KEY_COLUMN_RE = re.compile(r"Key \(([^)]+)\)")
# ... is still referenced from table "sales".
# ... is not present in table "categories".
_TABLE_RE = re.compile(r'table "([^"]+)"')


@dataclass(eq=False)
class PersistenceError(Exception):
    """
    A failed call to the persistence gateway.

    Attributes:
        kind: Violation category
        message: Vendor message (for logs and diagnostics only)
        column: Constrained column, when the database names one
        table: Table named in the detail (referencing or referenced)
        code: Raw vendor code (e.g. "23505", "PGRST116")
        details: Raw vendor detail text
        hint: Raw vendor hint
    """
    kind: ViolationKind
    message: str
    column: str | None = None
    table: str | None = None
    code: str | None = None
    details: str | None = None
    hint: str | None = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code or self.kind.value}] {self.message}"


def classify_api_error(error: APIError) -> PersistenceError:
    """
    Convert a PostgREST APIError into a PersistenceError.

    Args:
        error: Exception raised by postgrest while executing a query

    Returns:
        PersistenceError with kind, column and table filled in where the
        database reported them

    Example:
        try:
            query.execute()
        except APIError as e:
            raise classify_api_error(e) from e
    """
    code = getattr(error, "code", None)
    message = getattr(error, "message", None) or str(error)
    details = getattr(error, "details", None)
    hint = getattr(error, "hint", None)

    kind = _CODE_KINDS.get(str(code), ViolationKind.OTHER) if code else ViolationKind.OTHER

    column = None
    table = None
    if isinstance(details, str):
        column_match = _KEY_COLUMN_RE.search(details)
        if column_match:
            # Composite keys come back as "a, b"; the first column is enough
            column = column_match.group(1).split(",")[0].strip()
        table_match = _TABLE_RE.search(details)
        if table_match:
            table = table_match.group(1)

    return PersistenceError(
        kind=kind,
        message=message,
        column=column,
        table=table,
        code=str(code) if code else None,
        details=details if isinstance(details, str) else None,
        hint=hint if isinstance(hint, str) else None,
    )


def gateway_failure(error: Exception) -> PersistenceError:
    """
    Wrap any exception raised while talking to Supabase.

    APIErrors are classified; anything else (network, decoding) becomes
    an OTHER PersistenceError carrying the original message.
    """
    if isinstance(error, PersistenceError):
        return error
    if isinstance(error, APIError):
        return classify_api_error(error)
    return PersistenceError(kind=ViolationKind.OTHER, message=str(error))


# =============================================================================
# Client Lifecycle
# =============================================================================

class SupabaseClientError(Exception):
    """Raised when the Supabase client cannot be created or is not ready."""

    def __init__(self, message: str, code: str = "SUPABASE_ERROR", suggestion: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.suggestion = suggestion

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Holder for the process-wide Supabase client.

    The client is created once by initialize() during application startup.
    get_client() never creates one implicitly; route handlers receive it
    through FastAPI dependencies so tests can swap in fakes.
    """

    _instance: Client | None = None

    @classmethod
    def initialize(cls, url: str | None = None, key: str | None = None) -> Client:
        """
        Create the shared client. Calling it again is a no-op.

        Uses the service_role key, which bypasses Row Level Security.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is not None:
            return cls._instance

        try:
            cls._instance = create_client(
                url or settings.SUPABASE_URL,
                key or settings.SUPABASE_SERVICE_KEY,
            )
            logger.info("Supabase client initialized successfully")
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase client: {e}",
                code="CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file",
            ) from e
        return cls._instance

    @classmethod
    def get_client(cls) -> Client:
        """
        Return the shared client.

        Raises:
            SupabaseClientError: If initialize() has not run
        """
        if cls._instance is None:
            raise SupabaseClientError(
                message="Supabase client is not initialized",
                code="CLIENT_NOT_INITIALIZED",
                suggestion="Call SupabaseClient.initialize() during application startup",
            )
        return cls._instance

    @classmethod
    def is_initialized(cls) -> bool:
        return cls._instance is not None

    @classmethod
    def reset(cls) -> None:
        """Drop the shared client (shutdown and tests)."""
        cls._instance = None


def describe_error(error: PersistenceError) -> dict[str, Any]:
    """Vendor fields for log lines."""
    return {
        "kind": error.kind.value,
        "code": error.code,
        "message": error.message,
        "details": error.details,
        "hint": error.hint,
    }
