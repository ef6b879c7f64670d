"""Error taxonomy for the regeneration relay.

Every failure the relay can produce is one of the classes below.  Each carries
the HTTP status code the caller should see, so the API layer never has to
guess how an error maps onto a response.

========================  ======  ==============================================
Class                     Status  Condition
========================  ======  ==============================================
:class:`InvalidInput`     400     Malformed body, missing or empty prompt
:class:`MethodNotAllowed` 405     Any method other than ``POST``
:class:`Misconfigured`    500     Provider credential missing
:class:`UpstreamError`    502     Provider failure or unusable provider response
:class:`InternalError`    500     Unanticipated exception during the call
========================  ======  ==============================================
"""

from __future__ import annotations


class RelayError(Exception):
    """Base class for all relay failures.

    Attributes:
        message: Human-readable message returned to the caller.
        status_code: HTTP status code returned to the caller.
    """

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidInput(RelayError):
    """The caller sent a malformed body or an unusable prompt."""

    status_code = 400


class MethodNotAllowed(RelayError):
    """The endpoint was called with a method other than ``POST``."""

    status_code = 405

    def __init__(self, message: str = "Method not allowed") -> None:
        super().__init__(message)


class Misconfigured(RelayError):
    """The operator has not provided the provider credential."""

    status_code = 500


class UpstreamError(RelayError):
    """The provider failed or returned a response without a usable image.

    Attributes:
        upstream_status: HTTP status reported by the provider, when the
            failure came from a non-success response.
    """

    status_code = 502

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


class InternalError(RelayError):
    """An unanticipated exception escaped the upstream call."""

    status_code = 500
