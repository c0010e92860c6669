"""
MediaRelay Backend — Upload Routes
====================================

What:  POST /api/upload (one image) and POST /api/uploads (several images).
How:   Multipart parts are read into memory (bounded by the per-file limit),
       gated by the ingress validator, streamed to the remote store and
       rendered by the normalizer.

Request Flow (batch):
    1. Count check on the raw parts (nothing read yet)
    2. Each part read into a FileItem, in arrival order across both field
       names, stopping one byte past the limit
    3. Declared types checked for the whole request
    4. BatchCoordinator uploads all files concurrently
    5. 200 with one data entry per file, in request order

Validation failures raise ValidationError and are answered with 400 by the
global handler in main.py.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import JSONResponse

from mediarelay.dependencies import (
    get_batch_coordinator,
    get_upload_limits,
    get_uploader,
)
from mediarelay.models.upload import UploadLimits
from mediarelay.schemas.upload import BatchUploadResponse, ErrorResponse, UploadResponse
from mediarelay.services.batch import BatchCoordinator
from mediarelay.services.ingest import collect_parts, read_file_item, read_file_items
from mediarelay.services.normalizer import render_batch, render_upload
from mediarelay.services.uploader import StreamUploader
from mediarelay.services.validator import validate_batch, validate_count, validate_single

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Uploads"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        200: {"description": "Image stored", "model": UploadResponse},
        400: {"description": "No file, unsupported type or file too large", "model": ErrorResponse},
        500: {"description": "Remote store failure", "model": ErrorResponse},
    },
    summary="Upload a single image",
    description=(
        "Upload one image in the multipart field `image`. The file is streamed "
        "to the media store; nothing is kept on this server."
    ),
)
async def upload_image(
    image: Optional[UploadFile] = File(
        default=None,
        description="Image file (jpeg, png, webp or gif by default)",
    ),
    limits: UploadLimits = Depends(get_upload_limits),
    uploader: StreamUploader = Depends(get_uploader),
) -> JSONResponse:
    item = await read_file_item(image, "image", limits) if image is not None else None
    item = validate_single(item, limits)

    logger.info(
        "Received upload: filename=%s, type=%s, size=%d bytes",
        item.filename or "unknown",
        item.content_type,
        item.size,
    )

    outcome = await uploader.upload(item)
    status_code, body = render_upload(outcome)
    return JSONResponse(status_code=status_code, content=body)


@router.post(
    "/uploads",
    response_model=BatchUploadResponse,
    responses={
        200: {"description": "Per-file results, in request order", "model": BatchUploadResponse},
        400: {"description": "No files, too many files or unsupported type", "model": ErrorResponse},
    },
    summary="Upload several images",
    description=(
        "Upload up to the configured number of images in the multipart field "
        "`images` (or `images[]`). Files are uploaded concurrently; a failed "
        "file is reported in place without affecting the others."
    ),
)
async def upload_images(
    request: Request,
    # Declared for the OpenAPI schema and part type checks; files are taken
    # from the parsed form below so mixed field names keep arrival order
    images: Optional[List[UploadFile]] = File(default=None, description="Image files"),
    images_bracketed: Optional[List[UploadFile]] = File(
        default=None,
        alias="images[]",
        description="Image files (PHP-style field name)",
    ),
    limits: UploadLimits = Depends(get_upload_limits),
    coordinator: BatchCoordinator = Depends(get_batch_coordinator),
) -> JSONResponse:
    parts = collect_parts(await request.form())
    validate_count(len(parts), limits)

    items = await read_file_items(parts, limits)
    items = validate_batch(items, limits)

    logger.info(
        "Received batch upload: %d files, %d bytes total",
        len(items),
        sum(item.size for item in items),
    )

    results = await coordinator.upload_all(items)
    status_code, body = render_batch(results)
    return JSONResponse(status_code=status_code, content=body)
