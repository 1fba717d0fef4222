"""HTTP client for the chat relay endpoint."""

import logging
import os
from collections.abc import Callable

import httpx

from chatrelay.models.schemas import ChatRequest, ChatTurn
from chatrelay.ui.state import (
    StateStore,
    append_fragment,
    conversation_for_request,
    fail_reply,
    finish_reply,
)

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")


async def stream_chat_response(
    messages: list[ChatTurn],
    on_chunk: Callable[[str], None],
    on_complete: Callable[[], None],
    on_error: Callable[[str], None],
    *,
    base_url: str = API_BASE_URL,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Consume the plain-text stream from /api/chat.

    Calls ``on_chunk`` with each decoded piece as it arrives. Any HTTP status
    or transport failure, including one mid-stream, ends in ``on_error``.
    """
    payload = ChatRequest(messages=messages)
    async with httpx.AsyncClient(
        base_url=base_url, timeout=120.0, transport=transport
    ) as client:
        try:
            async with client.stream(
                "POST",
                "/api/chat",
                json=payload.model_dump(),
            ) as response:
                response.raise_for_status()
                async for text in response.aiter_text():
                    if text:
                        on_chunk(text)
        except httpx.HTTPStatusError as e:
            on_error(f"HTTP {e.response.status_code}")
            return
        except httpx.HTTPError as e:
            on_error(f"Connection failed: {e}")
            return
    on_complete()


async def relay_reply(
    store: StateStore,
    on_fragment: Callable[[str], None],
    on_failure: Callable[[], None],
    *,
    base_url: str = API_BASE_URL,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Stream the reply for the store's conversation into its last turn.

    The in-flight turn always ends either finished or failed, even when a
    callback raises, so the page never stays stuck in the streaming state.
    """

    def on_chunk(text: str) -> None:
        store.apply(append_fragment, text)
        on_fragment(text)

    def on_error(error: str) -> None:
        logger.warning(f"Chat request failed: {error}")
        store.apply(fail_reply)
        on_failure()

    try:
        await stream_chat_response(
            conversation_for_request(store.state),
            on_chunk,
            lambda: store.apply(finish_reply),
            on_error,
            base_url=base_url,
            transport=transport,
        )
    except Exception:
        logger.exception("Streaming reply failed")
        store.apply(fail_reply)
        on_failure()
