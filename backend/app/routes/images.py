"""
Travel Journal Backend — Image Route Handlers
===============================================

What:  POST /image-upload and DELETE /delete-image.
Why:   The editor uploads an image first, then saves the entry with the
       returned URL; replacing or clearing an image deletes the old file.
How:   Multipart field "image" → AssetService.store(); imageUrl query
       parameter → AssetService.delete().

Neither route requires a token; file names are unguessable uuid4 values and
deletion is confined to the uploads directory.
"""

import logging
from typing import Optional

from fastapi import APIRouter, File, Query, UploadFile

from app.dependencies import AssetServiceDep
from app.exceptions import FileStorageError, ValidationError
from app.schemas.common import Envelope, ErrorResponse
from app.schemas.travel_blog import ImageUploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Images"])


@router.post(
    "/image-upload",
    response_model=ImageUploadResponse,
    responses={
        400: {"description": "No image, unsupported type, or too large", "model": ErrorResponse},
        500: {"description": "Could not write the file", "model": ErrorResponse},
    },
    summary="Store an image and return its URL",
)
async def upload_image(
    assets: AssetServiceDep,
    image: Optional[UploadFile] = File(default=None, description="Image file (png, jpg, gif, webp)"),
) -> ImageUploadResponse:
    if image is None:
        raise ValidationError("No image uploaded", field="image")

    try:
        content = await image.read()
        logger.info(
            "Received image upload: filename=%s, size=%d bytes",
            image.filename or "unknown",
            len(content),
        )
        stored = await assets.store(content, image.filename)
    finally:
        await image.close()

    return ImageUploadResponse(message="Image uploaded", image_url=stored.url)


@router.delete(
    "/delete-image",
    response_model=Envelope,
    responses={
        400: {"description": "imageUrl missing", "model": ErrorResponse},
        500: {"description": "File exists but could not be removed", "model": ErrorResponse},
    },
    summary="Remove a stored image file",
)
async def delete_image(
    assets: AssetServiceDep,
    image_url: Optional[str] = Query(default=None, alias="imageUrl"),
) -> Envelope:
    if not image_url:
        raise ValidationError("imageUrl parameter is required", field="imageUrl")

    deletion = await assets.delete(image_url)
    if not deletion.ok:
        raise FileStorageError(
            message="Failed to delete image. Please try again.",
            context={"filename": deletion.filename, "error": deletion.error},
        )
    if not deletion.deleted:
        # 200, but flagged so the editor knows nothing was removed
        return Envelope(error=True, message="Image not found")
    return Envelope(message="Image deleted successfully")
