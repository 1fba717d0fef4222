"""Outbound client for the streaming chat-completion provider."""

import logging

import httpx

from chatrelay.models.schemas import ChatTurn, CompletionRequest
from chatrelay.relay.config import RelayConfig
from chatrelay.relay.errors import UpstreamConnectionError, UpstreamStatusError

logger = logging.getLogger(__name__)


class UpstreamClient:
    """Issues the single streaming POST a relay request needs.

    One instance per inbound request; ``aclose`` releases the connection pool
    and must be called once the relayed stream is finished.
    """

    def __init__(
        self,
        config: RelayConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Relay configuration holding the credential and model.
            transport: Optional transport override (tests use httpx.MockTransport).
        """
        self._config = config
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout),
            transport=transport,
        )

    async def open_stream(self, messages: list[ChatTurn]) -> httpx.Response:
        """Send the conversation upstream with streaming enabled.

        Args:
            messages: The conversation to forward.

        Returns:
            A response whose body has not been read yet.

        Raises:
            UpstreamStatusError: Provider answered with a non-success status.
            UpstreamConnectionError: Request could not be sent.
        """
        payload = CompletionRequest(model=self._config.model_name, messages=messages)
        request = self._client.build_request(
            "POST",
            self._config.completions_url,
            json=payload.model_dump(),
            headers={
                "Authorization": f"Bearer {self._config.api_key}",
                "Content-Type": "application/json",
            },
        )

        try:
            response = await self._client.send(request, stream=True)
        except httpx.RequestError as e:
            raise UpstreamConnectionError(f"Failed to reach upstream: {e}") from e

        if not response.is_success:
            await response.aclose()
            logger.error(f"Upstream rejected chat request with status {response.status_code}")
            raise UpstreamStatusError(response.status_code)

        return response

    async def aclose(self) -> None:
        await self._client.aclose()
