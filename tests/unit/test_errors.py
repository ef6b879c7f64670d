"""Tests for roomrender.core.errors: the relay error taxonomy."""

from __future__ import annotations

import pytest

from roomrender.core.errors import (
    InternalError,
    InvalidInput,
    MethodNotAllowed,
    Misconfigured,
    RelayError,
    UpstreamError,
)


class TestStatusCodes:
    """Each error class should carry its client-visible status code."""

    @pytest.mark.parametrize(
        ("error_cls", "status"),
        [
            (InvalidInput, 400),
            (Misconfigured, 500),
            (UpstreamError, 502),
            (InternalError, 500),
        ],
    )
    def test_class_status(self, error_cls, status):
        error = error_cls("boom")
        assert error.status_code == status
        assert error.message == "boom"
        assert isinstance(error, RelayError)

    def test_method_not_allowed_default_message(self):
        error = MethodNotAllowed()
        assert error.status_code == 405
        assert error.message == "Method not allowed"

    def test_explicit_status_overrides_class_default(self):
        """The base class accepts an explicit status for ad-hoc failures."""
        error = RelayError("teapot", status_code=418)
        assert error.status_code == 418

    def test_str_is_message(self):
        assert str(InvalidInput("prompt is required")) == "prompt is required"


class TestUpstreamError:
    def test_records_upstream_status(self):
        """The provider's own status is kept alongside the 502 returned to callers."""
        error = UpstreamError("Gemini API error (429): quota", upstream_status=429)
        assert error.status_code == 502
        assert error.upstream_status == 429

    def test_upstream_status_defaults_to_none(self):
        assert UpstreamError("No image data in Gemini response").upstream_status is None
