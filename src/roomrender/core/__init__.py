"""Core functionality for concept image regeneration.

- **RoomRenderConfig**: Configuration management using Pydantic Settings
- **RegenerationRelay**: Validates a refinement prompt, calls Gemini once, and
  relays the first inline image (or a structured failure)
- **errors**: The relay's error taxonomy, each class carrying its HTTP status

Usage Example
-------------
::

    from roomrender.core import RegenerationRelay, RoomRenderConfig

    relay = RegenerationRelay(RoomRenderConfig())
    result = await relay.regenerate(b'{"prompt": "swap the rug for jute"}')
"""

from roomrender.core.config import RoomRenderConfig, config
from roomrender.core.models import RelayFailure, RelayResult, RelaySuccess
from roomrender.core.relay import RegenerationRelay

__all__ = [
    "RegenerationRelay",
    "RelayFailure",
    "RelayResult",
    "RelaySuccess",
    "RoomRenderConfig",
    "config",
]
