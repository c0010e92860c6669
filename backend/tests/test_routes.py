"""
MediaRelay Backend — API Route Tests
======================================

What:  End-to-end HTTP behaviour through the FastAPI app with a FakeStore.
How:   httpx AsyncClient over ASGITransport (see conftest.test_client).

What we test:
    ✅ Health payload
    ✅ Single upload: success projection, missing file, bad type, too large,
       remote failure
    ✅ Batch upload: order (also across mixed field names), per-file size
       failure, count/type rejections with zero remote calls, both field
       spellings
    ✅ Delete: pass-through, folder-qualified and whitespace ids, empty id
    ✅ Configured media types compared case-insensitively
    ✅ Request ID and security headers
"""

import pytest
from httpx import ASGITransport, AsyncClient

from mediarelay.config import Settings
from mediarelay.exceptions import RemoteStoreError
from mediarelay.main import create_app
from tests.fakes import ONE_MB


def png(name, data=b"\x89PNG\r\n\x1a\n" + b"\x00" * 24):
    return (name, data, "image/png")


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"ok": True, "service": "mediarelay-test"}


class TestSingleUpload:

    @pytest.mark.asyncio
    async def test_upload_success(self, test_client, fake_store):
        response = await test_client.post("/api/upload", files={"image": png("cat.png")})

        assert response.status_code == 200
        assert response.json() == {
            "message": "Uploaded",
            "data": {
                "public_id": "tests/cat.png",
                "url": "https://res.cloudinary.com/demo/image/upload/tests/cat.png",
                "width": 64,
                "height": 48,
                "format": "png",
                "bytes": 32,
            },
        }
        assert fake_store.uploads[0]["folder"] == "tests"

    @pytest.mark.asyncio
    async def test_no_file(self, test_client, fake_store):
        response = await test_client.post("/api/upload")
        assert response.status_code == 400
        assert response.json() == {"message": "No file uploaded", "reason": "no_files"}
        assert fake_store.uploads == []

    @pytest.mark.asyncio
    async def test_unsupported_type(self, test_client, fake_store):
        response = await test_client.post(
            "/api/upload", files={"image": ("notes.pdf", b"%PDF-1.7", "application/pdf")}
        )
        assert response.status_code == 400
        assert response.json()["reason"] == "unsupported_media_type"
        assert fake_store.uploads == []

    @pytest.mark.asyncio
    async def test_file_too_large(self, test_client, fake_store):
        response = await test_client.post(
            "/api/upload", files={"image": png("big.png", b"x" * (ONE_MB + 1))}
        )
        assert response.status_code == 400
        assert response.json() == {"message": "File too large", "reason": "file_too_large"}
        assert fake_store.uploads == []

    @pytest.mark.asyncio
    async def test_remote_failure(self, test_client, fake_store):
        fake_store.failures["cat.png"] = "Invalid Signature"
        response = await test_client.post("/api/upload", files={"image": png("cat.png")})
        assert response.status_code == 500
        assert response.json() == {"message": "Upload failed", "error": "Invalid Signature"}


class TestBatchUpload:

    @pytest.mark.asyncio
    async def test_batch_keeps_request_order(self, test_client, fake_store):
        fake_store.delays.update({"a.png": 0.05, "b.png": 0.01})
        files = [("images", png(name)) for name in ("a.png", "b.png", "c.png")]

        response = await test_client.post("/api/uploads", files=files)

        body = response.json()
        assert response.status_code == 200
        assert body["message"] == "Uploaded"
        assert body["count"] == 3
        assert [entry["public_id"] for entry in body["data"]] == [
            "tests/a.png",
            "tests/b.png",
            "tests/c.png",
        ]

    @pytest.mark.asyncio
    async def test_oversized_file_reported_in_place(self, test_client, fake_store):
        files = [
            ("images", png("a.png")),
            ("images", png("b.png", b"x" * (ONE_MB + 1))),
            ("images", png("c.png")),
        ]

        response = await test_client.post("/api/uploads", files=files)

        body = response.json()
        assert response.status_code == 200
        assert body["count"] == 3
        assert body["data"][0]["public_id"] == "tests/a.png"
        assert body["data"][1]["error"] == "file_too_large"
        assert body["data"][1]["filename"] == "b.png"
        assert body["data"][2]["public_id"] == "tests/c.png"
        assert len(fake_store.uploads) == 2

    @pytest.mark.asyncio
    async def test_remote_failure_embedded(self, test_client, fake_store):
        fake_store.failures["b.png"] = "Rate Limited"
        files = [("images", png("a.png")), ("images", png("b.png"))]

        response = await test_client.post("/api/uploads", files=files)

        assert response.status_code == 200
        assert response.json()["data"][1] == {
            "error": "remote_error",
            "message": "Rate Limited",
            "filename": "b.png",
        }

    @pytest.mark.asyncio
    async def test_bracketed_field_name(self, test_client):
        files = [("images[]", png("a.png")), ("images[]", png("b.png"))]
        response = await test_client.post("/api/uploads", files=files)
        assert response.status_code == 200
        assert response.json()["count"] == 2

    @pytest.mark.asyncio
    async def test_mixed_field_names_keep_arrival_order(self, test_client, fake_store):
        fake_store.delays["a.png"] = 0.02
        files = [
            ("images[]", png("a.png")),
            ("images", png("b.png")),
            ("images[]", png("c.png")),
        ]

        response = await test_client.post("/api/uploads", files=files)

        assert response.status_code == 200
        assert [entry["public_id"] for entry in response.json()["data"]] == [
            "tests/a.png",
            "tests/b.png",
            "tests/c.png",
        ]

    @pytest.mark.asyncio
    async def test_mixed_field_names_share_one_limit(self, test_client, fake_store):
        files = [("images", png("a.png")), ("images[]", png("b.png"))] * 2
        response = await test_client.post("/api/uploads", files=files)
        assert response.status_code == 400
        assert response.json()["reason"] == "too_many_files"
        assert fake_store.uploads == []

    @pytest.mark.asyncio
    async def test_no_files(self, test_client, fake_store):
        response = await test_client.post("/api/uploads")
        assert response.status_code == 400
        assert response.json() == {"message": "No files uploaded", "reason": "no_files"}

    @pytest.mark.asyncio
    async def test_too_many_files(self, test_client, fake_store):
        files = [("images", png(f"{i}.png")) for i in range(4)]
        response = await test_client.post("/api/uploads", files=files)
        assert response.status_code == 400
        assert response.json()["reason"] == "too_many_files"
        assert fake_store.uploads == []

    @pytest.mark.asyncio
    async def test_unsupported_type_rejects_batch(self, test_client, fake_store):
        files = [("images", png("a.png")), ("images", ("b.tiff", b"II*\x00", "image/tiff"))]
        response = await test_client.post("/api/uploads", files=files)
        assert response.status_code == 400
        assert response.json()["reason"] == "unsupported_media_type"
        assert fake_store.uploads == []


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_passes_result_through(self, test_client, fake_store):
        response = await test_client.delete("/api/delete/abc123")
        assert response.status_code == 200
        assert response.json() == {"message": "Deleted", "result": {"result": "ok"}}
        assert fake_store.destroyed == ["abc123"]

    @pytest.mark.asyncio
    async def test_folder_qualified_id(self, test_client, fake_store):
        response = await test_client.delete("/api/delete/avatars/abc123")
        assert response.status_code == 200
        assert fake_store.destroyed == ["avatars/abc123"]

    @pytest.mark.asyncio
    async def test_whitespace_id_forwarded(self, test_client, fake_store):
        response = await test_client.delete("/api/delete/%20")
        assert response.status_code == 200
        assert fake_store.destroyed == [" "]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/delete/", "/api/delete"])
    async def test_empty_id(self, test_client, fake_store, path):
        response = await test_client.delete(path)
        assert response.status_code == 400
        assert response.json() == {"message": "publicId required", "reason": "missing_public_id"}
        assert fake_store.destroyed == []

    @pytest.mark.asyncio
    async def test_remote_failure(self, test_client, fake_store):
        fake_store.destroy_error = RemoteStoreError("Invalid API key")
        response = await test_client.delete("/api/delete/abc123")
        assert response.status_code == 500
        assert response.json() == {"message": "Delete failed", "error": "Invalid API key"}


class TestMiddleware:

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/api/health", headers={"X-Request-ID": "abc12345"})
        assert response.headers["X-Request-ID"] == "abc12345"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/api/health")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_security_headers(self, test_client):
        response = await test_client.get("/api/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "SAMEORIGIN"

    @pytest.mark.asyncio
    async def test_openapi_document(self, test_client):
        response = await test_client.get("/docs.json")
        assert response.status_code == 200
        assert "/api/uploads" in response.json()["paths"]


class TestConfiguredLimits:

    @pytest.mark.asyncio
    async def test_allowed_types_match_regardless_of_case(self, fake_store):
        app_settings = Settings(allowed_mime_types="image/PNG", service_name="mediarelay-test")
        app = create_app(app_settings, remote_store=fake_store)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/api/upload", files={"image": png("cat.png")})

        assert response.status_code == 200
        assert len(fake_store.uploads) == 1
