"""
MediaRelay Backend — Response Normalizer
==========================================

What:  Maps outcome values and rejection reasons onto the external JSON
       contract, as (status_code, body) pairs.
How:   Pure functions over the dataclasses in models/upload.py; no I/O.
Who:   Upload/delete routes and the global ValidationError handler.

Status mapping:
    UploadSuccess / DeleteSuccess / any batch          → 200
    Rejections (no_files, too_many_files, type, size)  → 400
    remote_error on single upload or delete            → 500
"""

from typing import Any, Dict, Sequence, Tuple

from mediarelay.models.upload import (
    DeleteFailure,
    DeleteOutcome,
    Reason,
    UploadFailure,
    UploadOutcome,
    UploadSuccess,
)
from mediarelay.schemas.upload import (
    BatchUploadResponse,
    DeleteResponse,
    ErrorResponse,
    FailedUpload,
    UploadedAsset,
    UploadResponse,
)

Rendered = Tuple[int, Dict[str, Any]]

UPLOAD_FAILED = "Upload failed"
DELETE_FAILED = "Delete failed"


def asset_payload(outcome: UploadSuccess) -> UploadedAsset:
    return UploadedAsset(
        public_id=outcome.public_id,
        url=outcome.url,
        width=outcome.width,
        height=outcome.height,
        format=outcome.format,
        bytes=outcome.bytes,
    )


def failure_payload(outcome: UploadFailure) -> FailedUpload:
    return FailedUpload(
        error=outcome.reason.value,
        message=outcome.detail,
        filename=outcome.filename,
    )


def render_rejection(reason: Reason, message: str) -> Rendered:
    return 400, ErrorResponse(message=message, reason=reason.value).model_dump(exclude_none=True)


def render_unexpected(message: str, error: str = "Unknown error") -> Rendered:
    return 500, ErrorResponse(message=message, error=error).model_dump(exclude_none=True)


def render_upload(outcome: UploadOutcome) -> Rendered:
    """Single upload: success → 200, size failure → 400, remote failure → 500."""
    if isinstance(outcome, UploadSuccess):
        return 200, UploadResponse(data=asset_payload(outcome)).model_dump()
    if outcome.reason == Reason.REMOTE_ERROR:
        return render_unexpected(UPLOAD_FAILED, outcome.detail)
    return render_rejection(outcome.reason, outcome.detail)


def render_batch(results: Sequence[UploadOutcome]) -> Rendered:
    """
    Batch upload: always 200, one entry per file in input order.

    Failed files are embedded as {error, message, filename} entries; there is
    no special case when every file failed.
    """
    data = [
        asset_payload(outcome) if isinstance(outcome, UploadSuccess) else failure_payload(outcome)
        for outcome in results
    ]
    return 200, BatchUploadResponse(count=len(data), data=data).model_dump()


def render_delete(outcome: DeleteOutcome) -> Rendered:
    if isinstance(outcome, DeleteFailure):
        if outcome.reason == Reason.MISSING_PUBLIC_ID:
            return render_rejection(outcome.reason, outcome.detail)
        return render_unexpected(DELETE_FAILED, outcome.detail)
    return 200, DeleteResponse(result=outcome.result).model_dump()
