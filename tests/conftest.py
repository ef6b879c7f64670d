"""Shared pytest fixtures for RoomRender tests."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import Any, Generator

import httpx
import pytest
from fastapi.testclient import TestClient

from roomrender.api.main import app, get_config, get_relay
from roomrender.core.config import RoomRenderConfig
from roomrender.core.relay import RegenerationRelay


def gemini_image_body(
    data: str = "QQ==",
    mime_type: str | None = "image/png",
    text: str | None = None,
) -> dict:
    """Build a ``generateContent`` response body with one inline image.

    Args:
        data: Base64 image payload.
        mime_type: MIME type to declare, or ``None`` to omit the field.
        text: Optional commentary part placed before the image.

    Returns:
        Dictionary shaped like a Gemini success response.
    """
    inline: dict[str, Any] = {"data": data}
    if mime_type is not None:
        inline["mimeType"] = mime_type

    parts: list[dict] = []
    if text is not None:
        parts.append({"text": text})
    parts.append({"inlineData": inline})
    return {"candidates": [{"content": {"parts": parts}}]}


class FakeGemini:
    """Stand-in for the Gemini endpoint, served through ``httpx.MockTransport``.

    Every request the relay sends is recorded in :attr:`requests`.  The reply
    is configured with :meth:`respond` or :meth:`fail`; by default a single
    PNG part (``"QQ=="``) is returned.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._status = 200
        self._kwargs: dict[str, Any] = {"json": gemini_image_body()}
        self._error: Exception | None = None

    def respond(self, status_code: int = 200, **kwargs: Any) -> None:
        """Reply with *status_code* and ``httpx.Response`` keyword arguments."""
        self._status = status_code
        self._kwargs = kwargs
        self._error = None

    def fail(self, error: Exception) -> None:
        """Raise *error* from the transport instead of replying."""
        self._error = error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        return httpx.Response(self._status, **self._kwargs)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> RoomRenderConfig:
    """Create a configuration with a fake credential and no ``.env`` loading."""
    return RoomRenderConfig(
        gemini_api_key="test-key",
        static_dir=str(temp_dir / "static"),
        _env_file=None,
    )


@pytest.fixture
def unconfigured_config(temp_dir: Path) -> RoomRenderConfig:
    """Create a configuration without a credential."""
    return RoomRenderConfig(
        gemini_api_key=None,
        static_dir=str(temp_dir / "static"),
        _env_file=None,
    )


@pytest.fixture
def fake_gemini() -> FakeGemini:
    return FakeGemini()


@pytest.fixture
def make_gemini_body():
    """Expose :func:`gemini_image_body` to tests."""
    return gemini_image_body


@pytest.fixture
def relay(test_config: RoomRenderConfig, fake_gemini: FakeGemini) -> RegenerationRelay:
    """Relay wired to :class:`FakeGemini` instead of the network."""
    return RegenerationRelay(test_config, transport=fake_gemini.transport)


@pytest.fixture
def test_client(
    test_config: RoomRenderConfig,
    fake_gemini: FakeGemini,
) -> Generator[TestClient, None, None]:
    """FastAPI TestClient whose relay talks to :class:`FakeGemini`.

    Both dependencies are overridden so that neither the real environment
    nor the network is touched.
    """
    app.dependency_overrides[get_config] = lambda: test_config
    app.dependency_overrides[get_relay] = lambda: RegenerationRelay(
        test_config, transport=fake_gemini.transport
    )
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def unconfigured_client(
    unconfigured_config: RoomRenderConfig,
    fake_gemini: FakeGemini,
) -> Generator[TestClient, None, None]:
    """TestClient whose configuration lacks the Gemini credential."""
    app.dependency_overrides[get_config] = lambda: unconfigured_config
    app.dependency_overrides[get_relay] = lambda: RegenerationRelay(
        unconfigured_config, transport=fake_gemini.transport
    )
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
