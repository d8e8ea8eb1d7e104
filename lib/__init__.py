# =============================================================================
# lib/ - Client Wrappers
# =============================================================================
# This package holds the process-wide clients for external services:
# - supabase_client.py: Supabase client + structured PersistenceError
# - s3_client.py: boto3 client for S3-compatible object storage
#
# Both are created once at startup (see app/main.py lifespan).
# =============================================================================

from lib.supabase_client import (
    PersistenceError,
    SupabaseClient,
    SupabaseClientError,
    ViolationKind,
    classify_api_error,
)
from lib.s3_client import S3Client

__all__ = [
    # Supabase
    "PersistenceError",
    "SupabaseClient",
    "SupabaseClientError",
    "ViolationKind",
    "classify_api_error",
    # Object storage
    "S3Client",
]
