"""Streaming relay between the provider body and the HTTP response.

A producer task reads the upstream body, extracts fragments and pushes them
into a ``FragmentChannel``. The HTTP layer only ever sees the channel's
consumer side, exposed as an async iterator of UTF-8 bytes.
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass

import httpx

from chatrelay.relay.errors import ChannelClosedError, UpstreamStreamError
from chatrelay.relay.events import iter_fragments
from chatrelay.relay.upstream import UpstreamClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _EndOfStream:
    error: BaseException | None = None


class FragmentChannel:
    """Bounded single-producer, single-consumer channel of reply fragments.

    Capacity defaults to one so the producer never runs more than one
    fragment ahead of the consumer.
    """

    def __init__(self, capacity: int = 1) -> None:
        self._queue: asyncio.Queue[str | _EndOfStream] = asyncio.Queue(maxsize=capacity)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, fragment: str) -> None:
        if self._closed:
            raise ChannelClosedError("Cannot send on a closed channel")
        await self._queue.put(fragment)

    async def close(self, error: BaseException | None = None) -> None:
        """Close the channel, optionally marking the stream as failed."""
        if self._closed:
            raise ChannelClosedError("Channel already closed")
        self._closed = True
        await self._queue.put(_EndOfStream(error))

    async def __aiter__(self) -> AsyncIterator[str]:
        while True:
            item = await self._queue.get()
            if isinstance(item, _EndOfStream):
                if item.error is not None:
                    raise UpstreamStreamError("Upstream stream failed") from item.error
                return
            yield item


class StreamRelay:
    """Relays one upstream streaming response to one client.

    Owns the upstream response and client. ``aclose`` releases both; it runs
    when the body iterator finishes, fails or is abandoned, and again as the
    response's background task, which covers a body that was never started.
    """

    def __init__(self, upstream: UpstreamClient, response: httpx.Response) -> None:
        self._upstream = upstream
        self._response = response
        self._producer: asyncio.Task[None] | None = None
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    async def _produce(self, channel: FragmentChannel) -> None:
        try:
            async for fragment in iter_fragments(self._response.aiter_lines()):
                await channel.send(fragment)
        except Exception as e:
            logger.warning(f"Upstream stream interrupted: {e!r}")
            await channel.close(error=e)
        else:
            await channel.close()

    async def aclose(self) -> None:
        """Stop the producer and release the provider response and client.

        Safe to call more than once; only the first call does any work.
        """
        if self._released:
            return
        self._released = True
        if self._producer is not None:
            self._producer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._producer
        await self._response.aclose()
        await self._upstream.aclose()

    async def body(self) -> AsyncIterator[bytes]:
        """Yield UTF-8 encoded fragments as soon as they are extracted.

        Raises:
            UpstreamStreamError: Reading the provider's body failed mid-stream.
        """
        channel = FragmentChannel()
        self._producer = asyncio.create_task(self._produce(channel))
        try:
            async for fragment in channel:
                yield fragment.encode("utf-8")
        finally:
            # Cleanup must finish even when the consumer itself is cancelled
            await asyncio.shield(self.aclose())
