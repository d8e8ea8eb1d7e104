# =============================================================================
# app/routers/upload.py - Image Upload
# =============================================================================
# Accepts one product image (multipart field "image") and stores it in
# object storage. Returns the public URL to save on the product.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from starlette.concurrency import run_in_threadpool

from app.auth import AuthUser, get_current_user
from app.config import settings
from app.dependencies import ImageStorageDep
from app.exceptions import NoFileError
from core.models.product import ImageUploadResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/image", response_model=ImageUploadResponse)
async def upload_image(
    storage: ImageStorageDep,
    image: Annotated[UploadFile | None, File(description="Image file (max 5MB)")] = None,
    user: AuthUser = Depends(get_current_user),
):
    """
    Upload a product image.

    This endpoint:
    1. Checks a file was sent
    2. Validates it (image/* only, size limit)
    3. Uploads it to object storage under a random name
    4. Returns the public URL
    """
    if image is None:
        logger.warning("No file provided in upload request")
        raise NoFileError()

    # Read one byte past the limit: enough to know the file is too large
    # without buffering an arbitrarily big body.
    content = await image.read(storage.max_size_bytes + 1)
    storage.validate_image(image.content_type, len(content))

    logger.info(f"Processing upload: {image.filename} ({len(content)} bytes, {image.content_type})")

    image_url = await run_in_threadpool(
        storage.upload_image,
        content,
        image.filename,
        image.content_type,
        settings.IMAGE_FOLDER,
    )

    return ImageUploadResponse(imageUrl=image_url)
