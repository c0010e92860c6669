"""
MediaRelay Backend — Pydantic Response Schemas
================================================

What:  The external JSON contract of the upload, batch, delete and health
       endpoints.
How:   The response normalizer builds these models and dumps them; FastAPI
       uses them to document each route in the OpenAPI schema.
Who:   services/normalizer.py and the route decorators.

Shapes:
    POST /api/upload    {message: "Uploaded", data: UploadedAsset}
    POST /api/uploads   {message: "Uploaded", count, data: [UploadedAsset | FailedUpload]}
    DELETE /api/delete  {message: "Deleted", result: <remote acknowledgment>}
    4xx                 {message, reason}
    5xx                 {message, error}
"""

from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field


class UploadedAsset(BaseModel):
    """
    Projection of the remote store's result for one stored asset.

    Values are copied without transformation; only `secure_url` is renamed
    to `url`.
    """
    public_id: str = Field(description="Remote identifier, used for deletion")
    url: str = Field(description="Canonical HTTPS URL of the stored asset")
    width: Optional[int] = Field(default=None, description="Width in pixels")
    height: Optional[int] = Field(default=None, description="Height in pixels")
    format: Optional[str] = Field(default=None, description="Stored format, e.g. jpg")
    bytes: Optional[int] = Field(default=None, description="Final stored size in bytes")


class FailedUpload(BaseModel):
    """One failed file inside a batch response."""
    error: str = Field(description="Machine-readable reason, e.g. file_too_large")
    message: str = Field(description="Short human-readable detail")
    filename: Optional[str] = Field(default=None, description="Original client filename")


class UploadResponse(BaseModel):
    message: str = Field(default="Uploaded")
    data: UploadedAsset


class BatchUploadResponse(BaseModel):
    """
    Batch upload result. `data` keeps the order of the uploaded files and
    holds one entry per file, successful or not.
    """
    message: str = Field(default="Uploaded")
    count: int = Field(description="Number of entries in data")
    data: List[Union[UploadedAsset, FailedUpload]]


class DeleteResponse(BaseModel):
    message: str = Field(default="Deleted")
    result: Any = Field(default=None, description="Remote acknowledgment, passed through")


class ErrorResponse(BaseModel):
    """
    Error body for every non-2xx answer.

    Fields:
        message: Human-readable summary ("Upload failed", "No file uploaded")
        reason:  Machine-readable validation code on 400 answers
        error:   Short remote/server error detail on 500 answers
    """
    message: str = Field(description="Human-readable error summary")
    reason: Optional[str] = Field(default=None, description="Validation reason code")
    error: Optional[str] = Field(default=None, description="Remote or server error detail")


class HealthResponse(BaseModel):
    ok: bool = Field(default=True)
    service: str = Field(description="Service name")
