"""
MediaRelay Backend — Upload Domain Values
==========================================

What:  In-process value types flowing through the upload pipeline.
How:   Plain dataclasses; nothing here is persisted. A FileItem lives for one
       request, outcomes are produced per file and rendered by the normalizer.
Who:   Built by the routes and services, consumed by the response normalizer.

Outcome variants:
    UploadOutcome = UploadSuccess | UploadFailure
    DeleteOutcome = DeleteSuccess | DeleteFailure

    Each failure carries a machine-readable Reason plus a short human detail.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Optional, Union


class Reason(str, Enum):
    """Machine-readable rejection/failure codes returned to clients."""

    NO_FILES = "no_files"
    TOO_MANY_FILES = "too_many_files"
    UNSUPPORTED_MEDIA_TYPE = "unsupported_media_type"
    FILE_TOO_LARGE = "file_too_large"
    REMOTE_ERROR = "remote_error"
    MISSING_PUBLIC_ID = "missing_public_id"


DEFAULT_MAX_FILE_SIZE_MB = 2
DEFAULT_MAX_FILES = 5
DEFAULT_MIME_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif")


@dataclass(frozen=True)
class UploadLimits:
    """
    Process-wide upload limits, read-only after startup.

    Built once from Settings (see Settings.upload_limits) and injected into
    the validator and uploader through app.state.
    """

    max_file_bytes: int = DEFAULT_MAX_FILE_SIZE_MB * 1024 * 1024
    max_files: int = DEFAULT_MAX_FILES
    allowed_mime_types: FrozenSet[str] = frozenset(DEFAULT_MIME_TYPES)

    @property
    def max_file_size_mb(self) -> float:
        return self.max_file_bytes / (1024 * 1024)


@dataclass
class FileItem:
    """
    One uploaded file held in memory.

    Attributes:
        data:         Raw bytes, owned by the request for its lifetime.
                      May hold one byte more than the limit when ingestion
                      stopped reading an oversized upload.
        content_type: Declared MIME type from the multipart part header.
        field_name:   Multipart field the file arrived under.
        filename:     Original client filename (informational only).
    """

    data: Union[bytes, bytearray]
    content_type: str
    field_name: str
    filename: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class Accepted:
    """Verdict for an item that may proceed to transfer."""


@dataclass(frozen=True)
class Rejected:
    """Verdict for an item that must not reach the remote store."""

    reason: Reason
    message: str


Verdict = Union[Accepted, Rejected]


@dataclass(frozen=True)
class UploadSuccess:
    public_id: str
    url: str
    width: Optional[int]
    height: Optional[int]
    format: Optional[str]
    bytes: Optional[int]


@dataclass(frozen=True)
class UploadFailure:
    reason: Reason
    detail: str
    filename: Optional[str] = None


UploadOutcome = Union[UploadSuccess, UploadFailure]


@dataclass(frozen=True)
class DeleteSuccess:
    # Remote acknowledgment, passed through without a schema
    result: Any = field(default=None)


@dataclass(frozen=True)
class DeleteFailure:
    reason: Reason
    detail: str


DeleteOutcome = Union[DeleteSuccess, DeleteFailure]
