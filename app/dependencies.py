# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# The Supabase and S3 clients are created once in the app lifespan; these
# providers only hand them out. Tests replace any of them through
# app.dependency_overrides.
# =============================================================================

from typing import Annotated, Any

from fastapi import Depends
from supabase import Client

from app.config import settings
from core.repositories import ProductRepository, UserRepository
from core.services.product_service import ProductService
from core.services.storage_service import ImageStorageService
from lib.s3_client import S3Client
from lib.supabase_client import SupabaseClient


def get_supabase_client() -> Client:
    """
    Get the process-wide Supabase client.

    Raises SupabaseClientError if the app started without initializing it.
    """
    return SupabaseClient.get_client()


def get_optional_supabase_client() -> Client | None:
    """Get the Supabase client, or None if it was never initialized (health checks)."""
    return SupabaseClient.get_client() if SupabaseClient.is_initialized() else None


def get_s3_client() -> Any | None:
    """Get the process-wide S3 client (None when storage is not configured)."""
    return S3Client.get_client()


def get_product_repository(
    client: Annotated[Client, Depends(get_supabase_client)],
) -> ProductRepository:
    return ProductRepository(client)


def get_user_repository(
    client: Annotated[Client, Depends(get_supabase_client)],
) -> UserRepository:
    return UserRepository(client)


def get_image_storage(
    client: Annotated[Any | None, Depends(get_s3_client)],
) -> ImageStorageService:
    return ImageStorageService(
        client=client,
        bucket=settings.R2_BUCKET_NAME,
        public_url=settings.R2_PUBLIC_URL,
        max_size_bytes=settings.max_image_size_bytes,
    )


def get_product_service(
    repository: Annotated[ProductRepository, Depends(get_product_repository)],
    storage: Annotated[ImageStorageService, Depends(get_image_storage)],
) -> ProductService:
    return ProductService(repository, storage=storage)


# Type aliases for dependency injection
ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]
ImageStorageDep = Annotated[ImageStorageService, Depends(get_image_storage)]
