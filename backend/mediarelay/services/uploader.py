"""
MediaRelay Backend — Stream Uploader
======================================

What:  Streams one in-memory file to the remote store and returns exactly one
       UploadOutcome (success or failure) for it.
How:   The owned buffer is wrapped in LimitedStream, a read-only binary stream
       over a memoryview of that buffer. The remote client pulls bytes from
       it; once the running count passes the per-file limit the stream raises
       FileTooLargeError and that file's transfer stops.
Who:   Called directly for POST /api/upload and fanned out by the
       BatchCoordinator for POST /api/uploads.

Failure mapping (never retried, one remote interaction per file):
    size above limit (known or mid-stream) → file_too_large
    RemoteStoreError / any client error    → remote_error
    empty or malformed result payload      → remote_error
"""

import io
import logging
import time
from typing import Any, Dict, Optional, Union

from mediarelay.exceptions import FileTooLargeError, RemoteStoreError
from mediarelay.models.upload import (
    FileItem,
    Reason,
    UploadFailure,
    UploadLimits,
    UploadOutcome,
    UploadSuccess,
)
from mediarelay.services.remote_store import RemoteStore

logger = logging.getLogger(__name__)

REQUIRED_RESULT_FIELDS = ("public_id", "secure_url")


class LimitedStream(io.RawIOBase):
    """
    Read-only stream over a byte buffer that enforces a byte limit.

    The buffer is exposed through a memoryview, so no second full copy exists
    until a reader asks for bytes. Reading past `limit` bytes raises
    FileTooLargeError; bytes up to the limit are served normally.
    """

    def __init__(
        self,
        data: Union[bytes, bytearray, memoryview],
        limit: int,
        name: Optional[str] = None,
    ):
        super().__init__()
        self._view = memoryview(data)
        self._limit = limit
        self._position = 0
        if name:
            # Remote clients use `.name` as the upload filename
            self.name = name

    @property
    def bytes_read(self) -> int:
        return self._position

    def readable(self) -> bool:
        return True

    def _advance(self, end: int) -> memoryview:
        if end > self._limit:
            logger.info(
                "Stream aborted at %d bytes (limit %d)", end, self._limit
            )
            raise FileTooLargeError(self._limit, context={"bytes_read": end})
        chunk = self._view[self._position:end]
        self._position = end
        return chunk

    def readinto(self, buffer) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        end = min(len(self._view), self._position + len(buffer))
        chunk = self._advance(end)
        size = len(chunk)
        buffer[:size] = chunk
        return size

    def read(self, size: Optional[int] = -1) -> bytes:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        if size is None or size < 0:
            end = len(self._view)
        else:
            end = min(len(self._view), self._position + size)
        return self._advance(end).tobytes()

    def readall(self) -> bytes:
        return self.read(-1)

    def close(self) -> None:
        if not self.closed:
            self._view.release()
        super().close()


class StreamUploader:
    """
    Uploads a single FileItem to the remote store.

    Args:
        store:  Shared RemoteStore handle.
        limits: Frozen UploadLimits (per-file byte limit is enforced here).
        folder: Default destination folder; None lets the store decide.
    """

    def __init__(
        self,
        store: RemoteStore,
        limits: UploadLimits,
        folder: Optional[str] = None,
    ):
        self.store = store
        self.limits = limits
        self.folder = folder

    def _too_large(self, item: FileItem) -> UploadFailure:
        return UploadFailure(
            reason=Reason.FILE_TOO_LARGE,
            detail=f"File exceeds the {self.limits.max_file_size_mb:g}MB limit",
            filename=item.filename,
        )

    async def upload(self, item: FileItem, folder: Optional[str] = None) -> UploadOutcome:
        """
        Stream `item` to the remote store.

        Args:
            item:   The file to upload; its buffer is not copied.
            folder: Destination override; defaults to the uploader's folder.

        Returns:
            UploadSuccess with the projected remote fields, or UploadFailure.
            Never raises for remote-side problems.
        """
        if item.size > self.limits.max_file_bytes:
            logger.info(
                "Skipping %s: %d bytes over %d byte limit",
                item.filename or item.field_name,
                item.size,
                self.limits.max_file_bytes,
            )
            return self._too_large(item)

        destination = folder if folder is not None else self.folder
        stream = LimitedStream(item.data, self.limits.max_file_bytes, name=item.filename)
        start_time = time.perf_counter()

        try:
            result = await self.store.upload_stream(stream, folder=destination)
        except FileTooLargeError:
            return self._too_large(item)
        except RemoteStoreError as e:
            logger.warning("Upload of %s failed: %s", item.filename or "<unnamed>", e.message)
            return UploadFailure(Reason.REMOTE_ERROR, e.message, item.filename)
        except Exception as e:
            logger.error(
                "Unexpected remote store error for %s: %s",
                item.filename or "<unnamed>",
                str(e),
                exc_info=True,
            )
            return UploadFailure(Reason.REMOTE_ERROR, str(e) or "Unknown error", item.filename)
        finally:
            stream.close()

        duration_ms = (time.perf_counter() - start_time) * 1000
        outcome = project_result(result, item.filename)
        if isinstance(outcome, UploadSuccess):
            logger.info(
                "Uploaded %s as %s (%s bytes) in %.0fms",
                item.filename or "<unnamed>",
                outcome.public_id,
                outcome.bytes,
                duration_ms,
            )
        return outcome


def project_result(result: Any, filename: Optional[str] = None) -> UploadOutcome:
    """
    Re-project a remote result payload onto UploadSuccess.

    Values are copied as-is: public_id, secure_url→url, width, height, format,
    bytes. An empty payload or one missing the identifier/URL is a failure.
    """
    if not result:
        return UploadFailure(Reason.REMOTE_ERROR, "Remote store error: empty result", filename)
    if not isinstance(result, dict):
        return UploadFailure(Reason.REMOTE_ERROR, "Remote store error: malformed result", filename)

    missing = [key for key in REQUIRED_RESULT_FIELDS if not result.get(key)]
    if missing:
        return UploadFailure(
            Reason.REMOTE_ERROR,
            f"Remote store error: result missing {', '.join(missing)}",
            filename,
        )

    payload: Dict[str, Any] = result
    return UploadSuccess(
        public_id=payload["public_id"],
        url=payload["secure_url"],
        width=payload.get("width"),
        height=payload.get("height"),
        format=payload.get("format"),
        bytes=payload.get("bytes"),
    )
