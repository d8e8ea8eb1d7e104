# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

from datetime import datetime, timezone
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool
from supabase import Client

from app.config import settings
from app.dependencies import get_optional_supabase_client, get_s3_client

router = APIRouter()

API_VERSION = "1.0.0"


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Individual service checks."""
    database: str
    storage: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _check_database(client: Client | None) -> str:
    if client is None:
        return "unhealthy: client not initialized"
    try:
        client.table("products").select("id").limit(1).execute()
        return "healthy"
    except Exception as e:
        return f"unhealthy: {str(e)[:50]}"


def _check_storage(s3_client: Any | None) -> str:
    if s3_client is None:
        return "not configured"
    try:
        s3_client.head_bucket(Bucket=settings.R2_BUCKET_NAME)
        return "healthy"
    except Exception as e:
        return f"unhealthy: {str(e)[:50]}"


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=API_VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(
    db_client: Annotated[Client | None, Depends(get_optional_supabase_client)],
    s3_client: Annotated[Any | None, Depends(get_s3_client)],
):
    """
    Readiness check endpoint.

    Returns whether the service is ready to accept requests.
    Checks database and storage connectivity. Unconfigured storage does
    not make the service unready: only uploads depend on it.
    """
    checks = ChecksResponse(
        database=await run_in_threadpool(_check_database, db_client),
        storage=await run_in_threadpool(_check_storage, s3_client),
    )

    ready = checks.database == "healthy" and checks.storage in ("healthy", "not configured")

    return ReadinessResponse(
        status="ready" if ready else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    Used by Kubernetes/Docker for restart decisions.
    """
    return LivenessResponse(
        status="alive",
        timestamp=_now(),
    )
