"""Error taxonomy for the chat relay."""


class RelayError(Exception):
    """Base class for relay failures."""

    pass


class UpstreamStatusError(RelayError):
    """Raised when the provider answers with a non-success status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Upstream API error: {status_code}")
        self.status_code = status_code


class UpstreamConnectionError(RelayError):
    """Raised when the outbound request cannot be sent."""

    pass


class UpstreamStreamError(RelayError):
    """Raised when reading the provider's body fails after streaming began."""

    pass


class ChannelClosedError(RelayError):
    """Raised when a fragment is sent on, or a channel is closed, twice."""

    pass
