"""RoomRender - interior concept gallery with Gemini-backed image regeneration."""

__version__ = "0.1.0"

from roomrender.core.config import RoomRenderConfig, config
from roomrender.core.relay import RegenerationRelay

__all__ = [
    "RegenerationRelay",
    "RoomRenderConfig",
    "config",
]
