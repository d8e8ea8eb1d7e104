# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Product Catalog API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload --port 3001
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.exceptions import (
    CatalogException,
    catalog_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.routers import health, products, upload
from app.auth import routes as auth_routes
from lib.s3_client import S3Client
from lib.supabase_client import SupabaseClient

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: Create the shared Supabase and S3 clients
    - Shutdown: Drop them
    """
    # Startup
    logger.info(f"Starting Product Catalog API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    SupabaseClient.initialize()
    S3Client.initialize()

    yield

    # Shutdown
    logger.info("Shutting down Product Catalog API")
    S3Client.reset()
    SupabaseClient.reset()


# Create FastAPI application
app = FastAPI(
    title="Product Catalog API",
    description="""
## Product Catalog API

CRUD for the store's product catalog, backed by Supabase, with product
images stored in S3-compatible object storage.

### Authentication

Write endpoints need `Authorization: Bearer <token>`.

| Situation | Status |
|-----------|--------|
| No token | 401 |
| Invalid, expired or unknown-user token | 403 |

### Errors

Every error response looks like:

```json
{"error": "Product with this barcode already exists", "code": "DUPLICATE_BARCODE"}
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Check access tokens",
        },
        {
            "name": "Products",
            "description": "Browse and manage the product catalog",
        },
        {
            "name": "Upload",
            "description": "Upload product images",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

app.add_exception_handler(CatalogException, catalog_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix=f"{settings.API_PREFIX}/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix=settings.API_PREFIX,
    tags=["Health"]
)

# Product catalog endpoints
app.include_router(
    products.router,
    prefix=f"{settings.API_PREFIX}/products",
    tags=["Products"]
)

# Image upload endpoints
app.include_router(
    upload.router,
    prefix=f"{settings.API_PREFIX}/upload",
    tags=["Upload"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Product Catalog API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": f"{settings.API_PREFIX}/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_development,
    )
