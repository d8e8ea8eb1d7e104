# =============================================================================
# lib/s3_client.py - S3-Compatible Object Storage Client
# =============================================================================
# Holds the process-wide boto3 S3 client used for product images.
# Works against Cloudflare R2, MinIO or AWS S3 (anything speaking the S3 API).
#
# Like SupabaseClient, the client is created once during application
# startup and is never re-created implicitly.
#
# Usage:
#   from lib.s3_client import S3Client
#   S3Client.initialize()          # once, in the app lifespan
#   client = S3Client.get_client() # None when storage is not configured
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.config import Config

from app.config import settings

logger = logging.getLogger(__name__)


class S3Client:
    """
    Holder for the process-wide boto3 S3 client.

    Storage is optional: if any R2 setting is missing, initialize() logs a
    warning and get_client() returns None. Uploads then fail with a clear
    "not configured" error instead of crashing the app at boot.
    """

    _instance: Any | None = None

    @classmethod
    def initialize(cls) -> Any | None:
        """
        Create the shared S3 client from settings. Calling it again is a no-op.

        Returns:
            The boto3 client, or None when storage is not configured
        """
        if cls._instance is not None:
            return cls._instance

        missing = settings.missing_storage_settings
        if missing:
            logger.warning(f"Object storage disabled, missing settings: {', '.join(missing)}")
            return None

        cls._instance = boto3.client(
            "s3",
            endpoint_url=settings.R2_ENDPOINT,
            aws_access_key_id=settings.R2_ACCESS_KEY_ID,
            aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY,
            region_name=settings.R2_REGION,
            config=Config(signature_version="s3v4"),
        )
        logger.info(f"S3 client initialized for bucket '{settings.R2_BUCKET_NAME}'")
        return cls._instance

    @classmethod
    def get_client(cls) -> Any | None:
        """Return the shared client, or None if storage is not configured."""
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the shared client (shutdown and tests)."""
        cls._instance = None
