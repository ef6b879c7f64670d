"""Data model for a single regeneration call.

Nothing here outlives one request:

RegenerationRequest
    The validated caller payload (just the prompt).
UpstreamImagePayload
    The first inline image found in the provider response.
RelaySuccess / RelayFailure
    The two variants of :data:`RelayResult`.  Exactly one is produced per
    call, and each knows how to render itself as the caller-facing JSON body.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field, StrictStr

DEFAULT_MIME_TYPE = "image/png"


class RegenerationRequest(BaseModel):
    """Body of ``POST /api/regenerate``.

    Attributes:
        prompt: Free-text refinement guidance.  Must be a non-empty JSON
            string; numbers, lists and ``null`` are rejected rather than
            coerced.
    """

    prompt: StrictStr = Field(
        ...,
        min_length=1,
        description="Refinement guidance forwarded verbatim to the image model.",
    )


@dataclass(frozen=True)
class UpstreamImagePayload:
    """Inline image data taken from a provider response part."""

    data: str
    mime_type: str = DEFAULT_MIME_TYPE


@dataclass(frozen=True)
class RelaySuccess:
    """A regenerated image, base64 data passed through untouched."""

    image: str
    mime_type: str

    @property
    def status_code(self) -> int:
        return 200

    def to_body(self) -> dict:
        return {"image": self.image, "mimeType": self.mime_type}


@dataclass(frozen=True)
class RelayFailure:
    """A failed regeneration with the status code the caller should see."""

    message: str
    status_code: int

    def to_body(self) -> dict:
        return {"error": self.message}


RelayResult = RelaySuccess | RelayFailure
