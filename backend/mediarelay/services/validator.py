"""
MediaRelay Backend — Ingress Validator
========================================

What:  Checks declared media type, file count and size against UploadLimits.
Why:   A rejected request never opens a connection to the remote store.
How:   Pure functions over (items, limits). `verdict()` returns a value;
       the `validate_*` entry points raise ValidationError so the global
       handler can answer 400 before any transfer starts.
Who:   Called by the upload routes before the Stream Uploader.

Checks:
    no_files                  request carried no file at all
    too_many_files            batch exceeds max_files (whole request rejected)
    unsupported_media_type    declared type not in the allowed set
    file_too_large            size above max_file_bytes

Batch requests skip the size check here. Oversized files in a batch are
failed by the uploader's stream limit so that siblings still upload.
"""

import logging
from typing import List, Optional, Sequence

from mediarelay.exceptions import ValidationError
from mediarelay.models.upload import (
    Accepted,
    FileItem,
    Reason,
    Rejected,
    UploadLimits,
    Verdict,
)

logger = logging.getLogger(__name__)


UNSUPPORTED_TYPE_MESSAGE = "Unsupported file type"
FILE_TOO_LARGE_MESSAGE = "File too large"


def check_media_type(item: FileItem, limits: UploadLimits) -> Verdict:
    if item.content_type not in limits.allowed_mime_types:
        return Rejected(Reason.UNSUPPORTED_MEDIA_TYPE, UNSUPPORTED_TYPE_MESSAGE)
    return Accepted()


def check_size(item: FileItem, limits: UploadLimits) -> Verdict:
    if item.size > limits.max_file_bytes:
        return Rejected(Reason.FILE_TOO_LARGE, FILE_TOO_LARGE_MESSAGE)
    return Accepted()


def verdict(item: FileItem, limits: UploadLimits, check_sizes: bool = True) -> Verdict:
    """
    Evaluate one item. Type is checked first and independently of size.
    """
    result = check_media_type(item, limits)
    if isinstance(result, Rejected) or not check_sizes:
        return result
    return check_size(item, limits)


def _raise(rejected: Rejected, item: Optional[FileItem] = None) -> None:
    context = {}
    if item is not None:
        context = {
            "filename": item.filename,
            "content_type": item.content_type,
            "size": item.size,
        }
    logger.info("Rejected upload (%s): %s", rejected.reason.value, context or "-")
    raise ValidationError(rejected.reason, message=rejected.message, context=context)


def validate_single(item: Optional[FileItem], limits: UploadLimits) -> FileItem:
    """
    Gate a single-file upload.

    Returns:
        The accepted item.

    Raises:
        ValidationError: no_files, unsupported_media_type or file_too_large.
    """
    if item is None:
        _raise(Rejected(Reason.NO_FILES, "No file uploaded"))

    result = verdict(item, limits)
    if isinstance(result, Rejected):
        _raise(result, item)
    return item


def validate_count(count: int, limits: UploadLimits) -> None:
    """
    Zero and over-limit checks for a batch, usable before any bytes are read.
    """
    if count == 0:
        _raise(Rejected(Reason.NO_FILES, "No files uploaded"))

    if count > limits.max_files:
        logger.info("Rejected batch of %d files (limit %d)", count, limits.max_files)
        raise ValidationError(
            Reason.TOO_MANY_FILES,
            message=f"Too many files (max {limits.max_files})",
            context={"count": count, "max_files": limits.max_files},
        )


def validate_batch(items: Sequence[FileItem], limits: UploadLimits) -> List[FileItem]:
    """
    Gate a multi-file upload as a whole.

    Order of checks: zero items → count → declared types. Any failure rejects
    the entire request; nothing is truncated.
    """
    validate_count(len(items), limits)

    for item in items:
        result = verdict(item, limits, check_sizes=False)
        if isinstance(result, Rejected):
            _raise(result, item)

    return list(items)
