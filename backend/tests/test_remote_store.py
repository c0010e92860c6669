"""
MediaRelay Backend — Cloudinary Store Unit Tests (Mocked)
===========================================================

What:  CloudinaryStore option building and error translation.
How:   Patches cloudinary.uploader so no request leaves the process.
"""

from unittest.mock import patch

import cloudinary.exceptions
import pytest

from mediarelay.exceptions import FileTooLargeError, RemoteStoreError
from mediarelay.services.remote_store import CloudinaryStore
from mediarelay.services.uploader import LimitedStream


class TestCloudinaryStore:

    @pytest.mark.asyncio
    async def test_upload_passes_stream_and_folder(self):
        store = CloudinaryStore(timeout=30)
        stream = LimitedStream(b"abc", limit=10, name="a.png")
        with patch("cloudinary.uploader.upload", return_value={"public_id": "x"}) as upload:
            result = await store.upload_stream(stream, folder="avatars")

        assert result == {"public_id": "x"}
        upload.assert_called_once_with(
            stream, resource_type="image", folder="avatars", timeout=30
        )

    @pytest.mark.asyncio
    async def test_upload_without_folder(self):
        store = CloudinaryStore()
        with patch("cloudinary.uploader.upload", return_value={}) as upload:
            await store.upload_stream(LimitedStream(b"a", limit=1))
        assert upload.call_args.kwargs == {"resource_type": "image"}

    @pytest.mark.asyncio
    async def test_cloudinary_error_translated(self):
        store = CloudinaryStore()
        error = cloudinary.exceptions.Error("Invalid image file")
        with patch("cloudinary.uploader.upload", side_effect=error):
            with pytest.raises(RemoteStoreError, match="Invalid image file"):
                await store.upload_stream(LimitedStream(b"a", limit=1))

    @pytest.mark.asyncio
    async def test_transport_error_translated(self):
        store = CloudinaryStore()
        with patch("cloudinary.uploader.upload", side_effect=OSError("Connection refused")):
            with pytest.raises(RemoteStoreError) as exc_info:
                await store.upload_stream(LimitedStream(b"a", limit=1))
        assert exc_info.value.context["error_type"] == "OSError"

    @pytest.mark.asyncio
    async def test_size_abort_not_translated(self):
        store = CloudinaryStore()

        def read_everything(stream, **options):
            return stream.read()

        with patch("cloudinary.uploader.upload", side_effect=read_everything):
            with pytest.raises(FileTooLargeError):
                await store.upload_stream(LimitedStream(b"abcdef", limit=3))

    @pytest.mark.asyncio
    async def test_destroy_returns_raw_acknowledgment(self):
        store = CloudinaryStore()
        with patch("cloudinary.uploader.destroy", return_value={"result": "not found"}) as destroy:
            result = await store.destroy("folder/abc")
        assert result == {"result": "not found"}
        destroy.assert_called_once_with("folder/abc")

    @pytest.mark.asyncio
    async def test_destroy_error_translated(self):
        store = CloudinaryStore()
        with patch("cloudinary.uploader.destroy", side_effect=cloudinary.exceptions.Error("nope")):
            with pytest.raises(RemoteStoreError, match="nope"):
                await store.destroy("abc")
