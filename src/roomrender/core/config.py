"""Configuration management for RoomRender.

This module provides centralized configuration management using Pydantic
Settings.  Values are loaded from environment variables with the
``ROOMRENDER_`` prefix, except for the provider credential, which keeps its
conventional name ``GEMINI_API_KEY`` so the same key works for every tool that
talks to Gemini.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:

1. Explicit keyword arguments (used by tests)
2. Environment variables
3. ``.env.local`` and ``.env`` files in the working directory
4. Default values defined in :class:`RoomRenderConfig`

Example ``.env.local`` file::

    GEMINI_API_KEY=your-key-here
    ROOMRENDER_GEMINI_MODEL=gemini-3-pro-image-preview
    ROOMRENDER_SERVER_PORT=8000

Global Configuration Instance
------------------------------
A global ``config`` instance is created at import time for the CLI entry
point.  Request handlers build a fresh instance per request (see
:func:`roomrender.api.main.get_config`) so that the credential always
reflects the current process environment.
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"
GEMINI_MODEL = "gemini-3-pro-image-preview"


class RoomRenderConfig(BaseSettings):
    """Main configuration for RoomRender.

    Attributes
    ----------
    Provider Settings:
        gemini_api_key : str | None
            Gemini API credential.  ``None`` or blank means the relay is not
            configured and every regeneration request fails with HTTP 500.
        gemini_api_base : str
            Base URL of the Gemini ``models`` collection.
        gemini_model : str
            Image-capable Gemini model identifier.
        request_timeout : float | None
            Upstream request timeout in seconds.  ``None`` disables the
            client-side timeout so the call inherits the network stack's
            behaviour.

    Paths:
        static_dir : Path
            Directory holding the static gallery (``index.html`` and the
            concept images).  Mounted only when it exists.

    Server Settings:
        server_host : str
            Bind address for uvicorn.
        server_port : int
            Bind port (1024-65535).
        log_level : str
            Root log level applied by the CLI entry point.

    Examples
    --------
    Create a configuration with a fake credential for tests:

        >>> cfg = RoomRenderConfig(gemini_api_key="test-key", _env_file=None)
        >>> cfg.is_configured
        True
    """

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        env_prefix="ROOMRENDER_",
        case_sensitive=False,
        extra="ignore",
    )

    # Provider settings
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "gemini_api_key", "GEMINI_API_KEY", "ROOMRENDER_GEMINI_API_KEY"
        ),
        description="Gemini API credential (GEMINI_API_KEY)",
    )
    gemini_api_base: str = Field(
        default=GEMINI_API_BASE,
        description="Base URL of the Gemini models collection",
    )
    gemini_model: str = Field(
        default=GEMINI_MODEL,
        description="Gemini image model used for regeneration",
    )
    request_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Upstream timeout in seconds (None = no client-side timeout)",
    )

    # Paths
    static_dir: Path = Field(
        default=Path("static"),
        description="Directory holding the static concept gallery",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    server_port: int = Field(
        default=8000,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level for the CLI entry point",
    )

    @property
    def is_configured(self) -> bool:
        """Whether a non-blank provider credential is present."""
        return bool(self.gemini_api_key and self.gemini_api_key.strip())


# Global configuration instance, used by the CLI entry point.
config = RoomRenderConfig()
