"""
MediaRelay Backend — Remote Store Client
==========================================

What:  Interface to the media-management service that durably stores assets,
       plus the Cloudinary implementation used in production.
Why:   Services depend on the abstract store, so tests swap in an in-memory
       fake and never reach Cloudinary.
How:   RemoteStore is an abstract base with two suspending operations.
       CloudinaryStore wraps the blocking Cloudinary SDK and runs every call
       in Starlette's threadpool so the event loop keeps serving requests
       while the upload is in flight.
Who:   StreamUploader (upload_stream) and AssetRemover (destroy).

Contract:
    upload_stream(stream, folder) → {public_id, secure_url, width, height,
                                     format, bytes, ...}
    destroy(public_id)            → opaque acknowledgment, e.g. {"result": "ok"}

    Both raise RemoteStoreError on any failure signalled by the service.
    A single RemoteStore instance is shared by all requests and by the
    concurrent uploads of one batch.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Dict, Optional

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
from starlette.concurrency import run_in_threadpool

from mediarelay.exceptions import FileTooLargeError, RemoteStoreError

logger = logging.getLogger(__name__)


class RemoteStore(ABC):
    """Abstract remote media store."""

    @abstractmethod
    async def upload_stream(
        self, stream: BinaryIO, folder: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Stream the bytes readable from `stream` to the store.

        Args:
            stream: Binary stream positioned at the start of the file.
            folder: Logical destination folder, passed through unmodified.
                    None means the store's default placement.

        Returns:
            The store's result payload for the new asset.

        Raises:
            RemoteStoreError: the store signalled a failure.
            FileTooLargeError: the stream aborted on the size limit.
        """
        ...

    @abstractmethod
    async def destroy(self, public_id: str) -> Any:
        """Delete an asset by identifier and return the raw acknowledgment."""
        ...


class CloudinaryStore(RemoteStore):
    """
    Cloudinary-backed RemoteStore.

    The SDK keeps credentials in module-level configuration, so they are set
    once here. Upload calls are thread-safe and share the SDK's urllib3 pool.
    """

    def __init__(
        self,
        cloud_name: str = "",
        api_key: str = "",
        api_secret: str = "",
        timeout: Optional[float] = None,
    ):
        if cloud_name and api_key and api_secret:
            cloudinary.config(
                cloud_name=cloud_name,
                api_key=api_key,
                api_secret=api_secret,
                secure=True,
            )
        self.timeout = timeout
        logger.info(
            "CloudinaryStore initialized (cloud=%s, timeout=%s)",
            cloud_name or "<unset>",
            timeout,
        )

    def _upload_options(self, folder: Optional[str]) -> Dict[str, Any]:
        options: Dict[str, Any] = {"resource_type": "image"}
        if folder:
            options["folder"] = folder
        if self.timeout is not None:
            options["timeout"] = self.timeout
        return options

    async def upload_stream(
        self, stream: BinaryIO, folder: Optional[str] = None
    ) -> Dict[str, Any]:
        options = self._upload_options(folder)
        try:
            return await run_in_threadpool(cloudinary.uploader.upload, stream, **options)
        except FileTooLargeError:
            raise
        except cloudinary.exceptions.Error as e:
            logger.warning("Cloudinary upload rejected: %s", str(e))
            raise RemoteStoreError(str(e) or "Cloudinary error", context={"folder": folder})
        except Exception as e:
            # Transport failures from urllib3 and friends
            logger.warning("Cloudinary upload failed: %s", str(e))
            raise RemoteStoreError(
                str(e) or "Unknown error",
                context={"folder": folder, "error_type": type(e).__name__},
            )

    async def destroy(self, public_id: str) -> Any:
        try:
            return await run_in_threadpool(cloudinary.uploader.destroy, public_id)
        except cloudinary.exceptions.Error as e:
            logger.warning("Cloudinary destroy rejected for %s: %s", public_id, str(e))
            raise RemoteStoreError(str(e) or "Cloudinary error", context={"public_id": public_id})
        except Exception as e:
            logger.warning("Cloudinary destroy failed for %s: %s", public_id, str(e))
            raise RemoteStoreError(
                str(e) or "Unknown error",
                context={"public_id": public_id, "error_type": type(e).__name__},
            )
