# =============================================================================
# core/services/storage_service.py - Product Image Storage
# =============================================================================
# Validates image uploads and stores them in S3-compatible object storage.
# Objects are public; the API hands back their public URL.
# =============================================================================

import logging
import re
import uuid
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError, EndpointConnectionError

from app.exceptions import FileTooLargeError, InvalidFileTypeError, StorageUploadError

logger = logging.getLogger(__name__)

MIME_EXTENSIONS: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/svg+xml": "svg",
}

# Extensions taken from client filenames must match this to be used in a key
_SAFE_EXTENSION = re.compile(r"[a-z0-9]{1,10}")


class ImageStorageService:
    """
    Service for product image storage.

    Args:
        client: boto3 S3 client, or None when storage is not configured
        bucket: Bucket name
        public_url: Base URL that serves the bucket publicly
        max_size_bytes: Largest accepted upload
    """

    def __init__(
        self,
        client: Any | None,
        bucket: str | None,
        public_url: str | None,
        max_size_bytes: int,
    ):
        self._client = client
        self.bucket = bucket
        self.public_url = public_url.rstrip("/") if public_url else None
        self.max_size_bytes = max_size_bytes

    @property
    def max_size_mb(self) -> int:
        return self.max_size_bytes // (1024 * 1024)

    @property
    def is_configured(self) -> bool:
        return self._client is not None and bool(self.bucket) and bool(self.public_url)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate_image(self, content_type: str | None, size: int) -> None:
        """
        Check an upload before it is stored. Type is checked before size.

        Raises:
            InvalidFileTypeError: If the MIME type is not image/*
            FileTooLargeError: If size exceeds the limit
        """
        if not content_type or not content_type.lower().startswith("image/"):
            logger.info(f"Rejected upload with content type {content_type!r}")
            raise InvalidFileTypeError(content_type)

        if size > self.max_size_bytes:
            logger.info(f"Rejected upload of {size} bytes (max {self.max_size_bytes})")
            raise FileTooLargeError(self.max_size_mb)

    # -------------------------------------------------------------------------
    # Upload / Delete
    # -------------------------------------------------------------------------

    @staticmethod
    def build_key(filename: str | None, content_type: str, folder: str) -> str:
        """
        Build a unique object key: <folder>/<uuid4>.<ext>

        The extension comes from the MIME type, falling back to the filename's
        when it is short and alphanumeric, else "bin".
        """
        extension = MIME_EXTENSIONS.get(content_type.lower())
        if not extension:
            candidate = filename.rsplit(".", 1)[-1].lower() if filename and "." in filename else ""
            extension = candidate if _SAFE_EXTENSION.fullmatch(candidate) else "bin"
        return f"{folder}/{uuid.uuid4()}.{extension}"

    def upload_image(
        self,
        content: bytes,
        filename: str | None,
        content_type: str,
        folder: str = "products",
    ) -> str:
        """
        Store an image and return its public URL.

        Args:
            content: File bytes
            filename: Original filename (used only for the extension fallback)
            content_type: MIME type of the file
            folder: Key prefix

        Returns:
            Public URL of the stored object

        Raises:
            StorageUploadError: If storage is not configured or the upload fails
        """
        if not self.is_configured:
            raise StorageUploadError("Object storage is not configured")

        key = self.build_key(filename, content_type, folder)
        logger.info(f"Uploading {filename!r} ({len(content)} bytes, {content_type}) to {self.bucket}/{key}")

        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=content,
                ContentType=content_type,
                ACL="public-read",
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            logger.error(f"Storage upload failed ({error_code}): {e}")
            raise StorageUploadError(self._describe_client_error(error_code, e)) from e
        except EndpointConnectionError as e:
            logger.error(f"Storage endpoint unreachable: {e}")
            raise StorageUploadError("Network error connecting to object storage") from e
        except BotoCoreError as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(f"Upload failed: {e}") from e

        url = f"{self.public_url}/{key}"
        logger.info(f"Uploaded image: {url}")
        return url

    def _describe_client_error(self, error_code: str, error: ClientError) -> str:
        if error_code == "NoSuchBucket":
            return f"Bucket '{self.bucket}' does not exist"
        if error_code == "InvalidAccessKeyId":
            return "Invalid storage access key ID"
        if error_code == "SignatureDoesNotMatch":
            return "Invalid storage secret access key"
        return f"Upload failed: {error}"

    def key_for_url(self, image_url: str) -> str | None:
        """Object key of a URL this service issued, else None."""
        if not self.public_url or not image_url.startswith(f"{self.public_url}/"):
            return None
        return image_url[len(self.public_url) + 1:] or None

    def delete_image(self, image_url: str) -> bool:
        """
        Delete a previously uploaded image.

        URLs outside this bucket's public URL are left alone.

        Returns:
            True if the object was deleted, False otherwise
        """
        key = self.key_for_url(image_url)
        if not self.is_configured or key is None:
            return False

        try:
            self._client.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete image {key}: {e}")
            return False

        logger.info(f"Deleted image: {key}")
        return True
