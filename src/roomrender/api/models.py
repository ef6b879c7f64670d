"""Pydantic response models for the RoomRender API.

The regeneration route reads its body by hand so that malformed JSON and bad
prompts map onto the relay's own 400 messages instead of FastAPI's 422.  These
models therefore exist for the OpenAPI schema, and for tests that assert on
response shapes.

Models
------
RegenerateResponse
    Success body of ``POST /api/regenerate``.
ErrorResponse
    Body of every failure response.
HealthResponse
    Body of ``GET /api/health``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RegenerateResponse(BaseModel):
    """Success body of ``POST /api/regenerate``.

    Attributes:
        image: Base64-encoded image bytes, exactly as the provider sent them.
        mime_type: MIME type of the image (serialised as ``mimeType``).
    """

    model_config = ConfigDict(populate_by_name=True)

    image: str = Field(..., description="Base64-encoded image data.")
    mime_type: str = Field(
        ...,
        alias="mimeType",
        description="MIME type of the image, e.g. 'image/png'.",
    )


class ErrorResponse(BaseModel):
    """Failure body shared by every error status."""

    error: str = Field(..., description="Human-readable error message.")


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    model: str
    configured: bool = Field(
        ...,
        description="Whether GEMINI_API_KEY is present in the environment.",
    )
