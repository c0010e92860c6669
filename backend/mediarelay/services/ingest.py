"""
MediaRelay Backend — Upload Ingestion
=======================================

What:  Turns a multipart UploadFile into an in-memory FileItem.
How:   Reads the part in chunks, counting bytes as they arrive. Reading stops
       one byte past the per-file limit, so an oversized upload never costs
       more memory than the limit itself; the extra byte marks the item as
       oversized for the validator and the uploader.
Who:   Upload routes; `collect_parts` also fixes the batch file order.
When:  Inside the upload routes, after FastAPI parsed the multipart body.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from fastapi import UploadFile
from starlette.datastructures import FormData
from starlette.datastructures import UploadFile as StarletteUploadFile

from mediarelay.models.upload import FileItem, UploadLimits

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

# Multipart field names accepted by the batch endpoint
BATCH_FIELDS = ("images", "images[]")


def _media_type(header: Optional[str]) -> str:
    # "image/png; name=x" → "image/png"
    return (header or "").split(";")[0].strip().lower()


async def read_file_item(
    upload: UploadFile, field_name: str, limits: UploadLimits
) -> FileItem:
    buffer = bytearray()
    ceiling = limits.max_file_bytes + 1
    try:
        while len(buffer) < ceiling:
            chunk = await upload.read(min(CHUNK_SIZE, ceiling - len(buffer)))
            if not chunk:
                break
            buffer.extend(chunk)
    finally:
        await upload.close()

    if len(buffer) > limits.max_file_bytes:
        logger.info(
            "Upload %s passed the %d byte limit while reading",
            upload.filename or field_name,
            limits.max_file_bytes,
        )

    return FileItem(
        data=buffer,
        content_type=_media_type(upload.content_type),
        field_name=field_name,
        filename=upload.filename,
    )


def collect_parts(
    form: FormData, field_names: Iterable[str] = BATCH_FIELDS
) -> List[Tuple[str, UploadFile]]:
    """
    File parts under any of `field_names`, in the order they arrived.

    Both field spellings share one sequence, so a request that alternates
    `images` and `images[]` keeps its original file order.
    """
    wanted = set(field_names)
    return [
        (key, value)
        for key, value in form.multi_items()
        if key in wanted and isinstance(value, StarletteUploadFile)
    ]


async def read_file_items(
    parts: Iterable[Tuple[str, UploadFile]], limits: UploadLimits
) -> List[FileItem]:
    # One after another, in arrival order
    return [await read_file_item(upload, field_name, limits) for field_name, upload in parts]
