"""
MediaRelay Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment is overridden before any mediarelay import; a FakeStore
       (tests/fakes.py) replaces Cloudinary so no test touches the network.

Fixtures (function-scoped):
    ├── limits:          Small UploadLimits (1 MB, 3 files, png/jpeg)
    ├── fake_store:      In-memory RemoteStore recording every call
    ├── png_bytes:       Minimal PNG payload
    ├── make_item:       Factory for FileItem values
    ├── app_settings:    Settings matching `limits`
    └── test_client:     HTTPX AsyncClient bound to a fresh app
"""

import os
from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Before any app import: no real credentials, quiet logs
os.environ["CLOUDINARY_CLOUD_NAME"] = ""
os.environ["CLOUDINARY_API_KEY"] = ""
os.environ["CLOUDINARY_API_SECRET"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from mediarelay.config import Settings  # noqa: E402
from mediarelay.main import create_app  # noqa: E402
from mediarelay.models.upload import FileItem, UploadLimits  # noqa: E402
from tests.fakes import ONE_MB, FakeStore  # noqa: E402


@pytest.fixture
def limits():
    return UploadLimits(
        max_file_bytes=ONE_MB,
        max_files=3,
        allowed_mime_types=frozenset({"image/png", "image/jpeg"}),
    )


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def png_bytes():
    """PNG signature plus an IHDR-sized tail; enough for declared-type tests."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 24


@pytest.fixture
def make_item(png_bytes):
    def _make(
        filename: str = "photo.png",
        content_type: str = "image/png",
        data: Optional[bytes] = None,
        field_name: str = "images",
    ) -> FileItem:
        return FileItem(
            data=png_bytes if data is None else data,
            content_type=content_type,
            field_name=field_name,
            filename=filename,
        )

    return _make


@pytest.fixture
def app_settings():
    return Settings(
        max_upload_size_mb=1,
        max_upload_files=3,
        allowed_mime_types="image/png,image/jpeg",
        cloudinary_folder="tests",
        service_name="mediarelay-test",
    )


@pytest_asyncio.fixture
async def test_client(app_settings, fake_store):
    """
    HTTPX AsyncClient talking to a fresh app wired to `fake_store`.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/health")
    """
    app = create_app(app_settings, remote_store=fake_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
