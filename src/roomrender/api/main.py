"""RoomRender: FastAPI Application.

This module is the single entry point for the web application.  It defines
the FastAPI ``app`` instance, the regeneration route, and the ``main()`` CLI
function that launches the uvicorn server.

Architecture
------------
- **Regeneration** is delegated to
  :class:`~roomrender.core.relay.RegenerationRelay`.  The route hands it the
  raw request body and turns the returned result straight into a JSON
  response; the relay already decided the status code.
- **Configuration** is built per request by :func:`get_config`, so the
  Gemini credential is read from the process environment on every call.
  Tests replace :func:`get_config` or :func:`get_relay` through
  ``app.dependency_overrides``.
- **The gallery** (``index.html`` plus concept images) is plain static
  content served from ``static_dir`` when that directory exists.

Endpoints
---------
==========================  ======================  ==========================
Method                      Path                    Purpose
==========================  ======================  ==========================
POST                        ``/api/regenerate``     Regenerate a concept image
any other method            ``/api/regenerate``     405 ``Method not allowed``
GET                         ``/api/health``         Liveness and config probe
GET                         ``/...``                Static gallery files
==========================  ======================  ==========================

Usage
-----
CLI (installed entry point)::

    roomrender

Direct invocation::

    python -m roomrender.api.main
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from roomrender import __version__
from roomrender.api.models import ErrorResponse, HealthResponse, RegenerateResponse
from roomrender.core.config import RoomRenderConfig, config
from roomrender.core.errors import MethodNotAllowed
from roomrender.core.relay import RegenerationRelay

logger = logging.getLogger(__name__)

REGENERATE_PATH = "/api/regenerate"

# Registered explicitly so that a mounted gallery at "/" never claims them.
NON_POST_METHODS = ("GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT")

# ---------------------------------------------------------------------------
# FastAPI application instance.
# ---------------------------------------------------------------------------
app = FastAPI(
    title="RoomRender",
    description="Interior concept gallery with Gemini-backed image regeneration.",
    version=__version__,
)

# Allow cross-origin requests so the gallery can be served from a different
# origin during development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Dependencies.
# ---------------------------------------------------------------------------


def get_config() -> RoomRenderConfig:
    """Build a fresh configuration from the current process environment.

    Returns:
        A new :class:`RoomRenderConfig`.  Reading it per request means a
        credential added to the environment takes effect without a restart.
    """
    return RoomRenderConfig()


def get_relay(cfg: RoomRenderConfig = Depends(get_config)) -> RegenerationRelay:
    """Build the relay for one request.

    Args:
        cfg: Configuration resolved by :func:`get_config`.

    Returns:
        A :class:`RegenerationRelay` bound to *cfg*.
    """
    return RegenerationRelay(cfg)


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.post(
    REGENERATE_PATH,
    response_model=RegenerateResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Malformed body or missing prompt"},
        500: {"model": ErrorResponse, "description": "Missing credential or internal error"},
        502: {"model": ErrorResponse, "description": "Gemini failed or returned no image"},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {
                    "schema": {
                        "type": "object",
                        "required": ["prompt"],
                        "properties": {"prompt": {"type": "string", "minLength": 1}},
                    }
                }
            },
        }
    },
)
async def regenerate(
    request: Request,
    relay: RegenerationRelay = Depends(get_relay),
) -> JSONResponse:
    """Regenerate a concept image from free-text refinement guidance.

    The body is read raw and passed to the relay, which owns validation so
    that malformed JSON and bad prompts produce its 400 messages rather than
    FastAPI's 422 validation errors.

    Args:
        request: Incoming request; only its body is used.
        relay: Relay resolved by :func:`get_relay`.

    Returns:
        ``{"image", "mimeType"}`` with 200, or ``{"error"}`` with 400, 500
        or 502.
    """
    body = await request.body()
    result = await relay.regenerate(body)
    return JSONResponse(content=result.to_body(), status_code=result.status_code)


def method_not_allowed_response() -> JSONResponse:
    """Build the JSON 405 returned for every method other than ``POST``."""
    error = MethodNotAllowed()
    return JSONResponse(
        content={"error": error.message},
        status_code=error.status_code,
        headers={"Allow": "POST"},
    )


@app.api_route(
    REGENERATE_PATH,
    methods=list(NON_POST_METHODS),
    include_in_schema=False,
)
async def regenerate_method_not_allowed() -> JSONResponse:
    """Reject every standard method other than ``POST`` with a JSON 405."""
    return method_not_allowed_response()


@app.exception_handler(StarletteHTTPException)
async def regenerate_http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    """Render router 405s on the regeneration path in the relay's JSON shape.

    Extension methods (anything outside :data:`NON_POST_METHODS`) are
    rejected by the router itself; every other HTTP error keeps FastAPI's
    default rendering.
    """
    if exc.status_code == 405 and request.url.path == REGENERATE_PATH:
        return method_not_allowed_response()
    return await http_exception_handler(request, exc)


@app.get("/api/health", response_model=HealthResponse)
async def health(cfg: RoomRenderConfig = Depends(get_config)) -> HealthResponse:
    """Report liveness and whether the Gemini credential is configured.

    The credential itself is never echoed.
    """
    return HealthResponse(
        version=__version__,
        model=cfg.gemini_model,
        configured=cfg.is_configured,
    )


def mount_gallery(application: FastAPI, static_dir: Path) -> bool:
    """Serve the static gallery from *static_dir* at ``/``.

    Must run after the API routes are registered so that they take
    precedence over static files.

    Returns:
        ``True`` if the directory exists and was mounted.
    """
    if not static_dir.is_dir():
        logger.info("Static gallery directory %s not found; not mounted.", static_dir)
        return False
    application.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")
    return True


mount_gallery(app, config.static_dir)


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port and log level from :data:`~roomrender.core.config.config`
    (``ROOMRENDER_SERVER_HOST``, ``ROOMRENDER_SERVER_PORT``,
    ``ROOMRENDER_LOG_LEVEL``).  Defaults to ``0.0.0.0:8000``.

    This function is registered as the ``roomrender`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not config.is_configured:
        logger.warning("GEMINI_API_KEY is not set; regeneration requests will fail.")

    uvicorn.run(
        "roomrender.api.main:app",
        host=config.server_host,
        port=config.server_port,
        log_level=config.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
