"""
MediaRelay Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the upload pipeline.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) turn them into JSON
       responses; the context is logged, never returned.
Who:   Raised by the validator, the size-limited stream and the remote store.

Exception Hierarchy:
    MediaRelayError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    │   └── FileTooLargeError    → 400 / per-file failure in batches
    └── RemoteStoreError         → 500 Internal Server Error

Remote failures inside an upload or delete are converted to outcome values by
the services, so RemoteStoreError only reaches a handler if it escapes that
conversion.
"""

from typing import Any, Dict, Optional

from mediarelay.models.upload import Reason


class MediaRelayError(Exception):
    """
    Base exception for all MediaRelay application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MediaRelayError):
    """
    Raised when an upload or delete request fails local validation.

    What:    No file, too many files, unsupported type, oversized file or a
             missing public id. Never reaches the remote store.
    HTTP:    400 Bad Request

    Example response:
        {
            "message": "Unsupported file type",
            "reason": "unsupported_media_type"
        }
    """

    def __init__(
        self,
        reason: Reason,
        message: str = "Validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["reason"] = reason.value
        super().__init__(message=message, context=ctx)
        self.reason = reason


class FileTooLargeError(ValidationError):
    """
    Raised mid-stream when the running byte count passes the per-file limit.

    Only the stream of the offending file is aborted; sibling files in the
    same batch keep going.
    """

    def __init__(
        self,
        limit_bytes: int,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["limit_bytes"] = limit_bytes
        super().__init__(Reason.FILE_TOO_LARGE, message="File too large", context=ctx)
        self.limit_bytes = limit_bytes


class RemoteStoreError(MediaRelayError):
    """
    Raised by the remote store client when the media service call fails.

    What:    Network failure, auth failure, remote-side rejection or a
             malformed/empty result.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Remote store error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
