"""Streaming relay to the upstream chat-completion provider.

Responsibilities:
    - Provider configuration loaded from the environment per request
    - The single outbound streaming POST
    - Incremental decoding of the provider's ``data:`` event stream
    - Re-emitting extracted text fragments, in order, as raw bytes

Holds no state across requests. Kept free of FastAPI so the parsing and
channel logic can be exercised without an HTTP server.
"""

from chatrelay.relay.config import RelayConfig, get_relay_config
from chatrelay.relay.errors import (
    RelayError,
    UpstreamConnectionError,
    UpstreamStatusError,
    UpstreamStreamError,
)
from chatrelay.relay.events import (
    Fragment,
    Ignored,
    Sentinel,
    iter_fragments,
    parse_event_line,
)
from chatrelay.relay.stream import FragmentChannel, StreamRelay
from chatrelay.relay.upstream import UpstreamClient

__all__ = [
    "Fragment",
    "FragmentChannel",
    "Ignored",
    "RelayConfig",
    "RelayError",
    "Sentinel",
    "StreamRelay",
    "UpstreamClient",
    "UpstreamConnectionError",
    "UpstreamStatusError",
    "UpstreamStreamError",
    "get_relay_config",
    "iter_fragments",
    "parse_event_line",
]
