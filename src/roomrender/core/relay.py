"""Regeneration relay: one prompt in, one Gemini image out.

This module provides :class:`RegenerationRelay`, the component behind
``POST /api/regenerate``.  It validates the caller's body, forwards the prompt
to the Gemini ``generateContent`` endpoint, and translates whatever comes back
into a :data:`~roomrender.core.models.RelayResult`.

Request Flow
------------
1. **Credential check**: a missing ``GEMINI_API_KEY`` fails with 500 before
   the body is even parsed.
2. **Body validation**: malformed JSON, or a missing / empty / non-string
   ``prompt``, fails with 400.
3. **Upstream call**: exactly one ``POST`` with the prompt as a single text
   part and a fixed generation config (TEXT + IMAGE, 4:3, 2K).
4. **Response interpretation**: non-2xx status, an in-body ``error`` object,
   a missing ``candidates[0].content.parts`` list, or a parts list with no
   inline image all fail with 502.
5. **Passthrough**: the first inline image part's base64 data and MIME type
   are returned verbatim.

The relay never retries, caches or persists anything.  Every failure is caught
in :meth:`RegenerationRelay.regenerate` and returned as a
:class:`~roomrender.core.models.RelayFailure`; nothing propagates to the HTTP
layer.

Usage
-----
::

    from roomrender.core.config import RoomRenderConfig
    from roomrender.core.relay import RegenerationRelay

    relay = RegenerationRelay(RoomRenderConfig())
    result = await relay.regenerate(b'{"prompt": "make the sofa red"}')
    print(result.status_code, result.to_body())
"""

from __future__ import annotations

import json
import logging

import httpx
from pydantic import ValidationError

from roomrender.core.config import RoomRenderConfig
from roomrender.core.errors import (
    InternalError,
    InvalidInput,
    Misconfigured,
    RelayError,
    UpstreamError,
)
from roomrender.core.models import (
    DEFAULT_MIME_TYPE,
    RegenerationRequest,
    RelayFailure,
    RelayResult,
    RelaySuccess,
    UpstreamImagePayload,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Fixed generation parameters.  The caller only ever supplies prompt text.
# ---------------------------------------------------------------------------
RESPONSE_MODALITIES = ("TEXT", "IMAGE")
ASPECT_RATIO = "4:3"
IMAGE_SIZE = "2K"

# Upstream error bodies are truncated to this many characters.
ERROR_EXCERPT_LENGTH = 200

MISSING_KEY_MESSAGE = "GEMINI_API_KEY not configured. Add it to the server environment."


def build_payload(prompt: str) -> dict:
    """Build the ``generateContent`` request body for *prompt*.

    Args:
        prompt: Validated refinement guidance.

    Returns:
        JSON-serialisable request body with the prompt as a single text part
        and the fixed generation configuration.
    """
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {
            "responseModalities": list(RESPONSE_MODALITIES),
            "imageConfig": {
                "aspectRatio": ASPECT_RATIO,
                "imageSize": IMAGE_SIZE,
            },
        },
    }


def parse_request(body: bytes | str) -> RegenerationRequest:
    """Decode and validate the caller's JSON body.

    Args:
        body: Raw request body.

    Returns:
        The validated :class:`RegenerationRequest`.

    Raises:
        InvalidInput: If the body is not valid JSON, or ``prompt`` is
            missing, not a string, or empty.
    """
    try:
        decoded = json.loads(body)
    except (TypeError, ValueError):
        raise InvalidInput("Invalid JSON body") from None

    try:
        return RegenerationRequest.model_validate(decoded)
    except ValidationError:
        raise InvalidInput("prompt is required") from None


def extract_image(data: dict) -> UpstreamImagePayload:
    """Pull the first inline image out of a parsed ``generateContent`` body.

    Args:
        data: Parsed JSON body of a 2xx provider response.

    Returns:
        The first part carrying non-empty ``inlineData.data``.  Its MIME type
        falls back to ``image/png`` when the provider omits it.

    Raises:
        UpstreamError: If the body carries an ``error`` object, lacks
            ``candidates[0].content.parts``, or no part holds image data.
    """
    if not isinstance(data, dict):
        raise UpstreamError("No image in Gemini response")

    error = data.get("error")
    if error is not None:
        message = error.get("message") if isinstance(error, dict) else None
        logger.error("Gemini API returned an in-body error: %s", error)
        raise UpstreamError(message or "Gemini API error")

    parts = None
    candidates = data.get("candidates")
    if isinstance(candidates, list) and candidates and isinstance(candidates[0], dict):
        content = candidates[0].get("content")
        if isinstance(content, dict):
            parts = content.get("parts")

    if not isinstance(parts, list):
        logger.warning("Gemini response has no candidate content")
        raise UpstreamError("No image in Gemini response")

    # Text parts (the model's commentary) are skipped; first image wins.
    for part in parts:
        inline = part.get("inlineData") if isinstance(part, dict) else None
        if isinstance(inline, dict) and inline.get("data"):
            return UpstreamImagePayload(
                data=inline["data"],
                mime_type=inline.get("mimeType") or DEFAULT_MIME_TYPE,
            )

    logger.warning("Gemini response has %d part(s) but no image data", len(parts))
    raise UpstreamError("No image data in Gemini response")


class RegenerationRelay:
    """Forwards a refinement prompt to Gemini and relays the resulting image.

    The relay is stateless: it holds only its configuration and an optional
    transport, so a single instance may serve concurrent calls.

    Attributes:
        _config (RoomRenderConfig):
            Provider credential, endpoint and timeout settings.
        _transport (httpx.AsyncBaseTransport | None):
            Transport handed to every ``httpx.AsyncClient``.  ``None`` uses
            the real network; tests pass an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: RoomRenderConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport

    # -- Public interface ---------------------------------------------------

    def endpoint_url(self) -> str:
        """Return the ``generateContent`` URL, without the credential."""
        base = self._config.gemini_api_base.rstrip("/")
        return f"{base}/{self._config.gemini_model}:generateContent"

    async def regenerate(self, body: bytes | str) -> RelayResult:
        """Run one regeneration request end to end.

        This is the error boundary: every :class:`RelayError` becomes a
        :class:`RelayFailure` with its own status, and any other exception is
        logged and reported as a 500 :class:`InternalError`.

        Args:
            body: Raw JSON request body from the caller.

        Returns:
            :class:`RelaySuccess` with the image, or :class:`RelayFailure`.
        """
        try:
            if not self._config.is_configured:
                raise Misconfigured(MISSING_KEY_MESSAGE)
            request = parse_request(body)
            image = await self.generate(request.prompt)
        except RelayError as exc:
            return RelayFailure(message=exc.message, status_code=exc.status_code)
        except Exception as exc:
            logger.exception("Regenerate error")
            error = InternalError(str(exc) or "Internal server error")
            return RelayFailure(message=error.message, status_code=error.status_code)

        return RelaySuccess(image=image.data, mime_type=image.mime_type)

    async def generate(self, prompt: str) -> UpstreamImagePayload:
        """Send *prompt* to Gemini and return the first inline image.

        :meth:`regenerate` checks the credential before parsing the body;
        the check is repeated here for callers that use this method directly.

        Args:
            prompt: Validated refinement guidance.

        Returns:
            The first inline image part of the response.

        Raises:
            Misconfigured: If no credential is configured.
            UpstreamError: For non-2xx responses and unusable bodies.
            httpx.HTTPError: For transport failures (not retried).
            ValueError: If a 2xx response body is not valid JSON.
        """
        if not self._config.is_configured:
            raise Misconfigured(MISSING_KEY_MESSAGE)

        url = self.endpoint_url()
        logger.debug("POST %s (model=%s)", url, self._config.gemini_model)

        async with httpx.AsyncClient(
            timeout=self._config.request_timeout,
            transport=self._transport,
        ) as client:
            response = await client.post(
                url,
                params={"key": self._config.gemini_api_key},
                json=build_payload(prompt),
                headers={"Content-Type": "application/json"},
            )

        if not response.is_success:
            error_text = response.text
            logger.error("Gemini API error: %s %s", response.status_code, error_text)
            raise UpstreamError(
                f"Gemini API error ({response.status_code}): "
                f"{error_text[:ERROR_EXCERPT_LENGTH]}",
                upstream_status=response.status_code,
            )

        return extract_image(response.json())
