"""Chat relay endpoint.

Forwards the conversation to the upstream provider and streams the reply
back as plain UTF-8 text.
"""

import asyncio
import logging

import httpx
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response, StreamingResponse
from starlette.background import BackgroundTask

from chatrelay.models.schemas import ChatRequest, ErrorResponse
from chatrelay.relay.config import get_relay_config
from chatrelay.relay.stream import StreamRelay
from chatrelay.relay.upstream import UpstreamClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

STREAM_MEDIA_TYPE = "text/plain; charset=utf-8"


def get_upstream_transport() -> httpx.AsyncBaseTransport | None:
    """Transport used for provider calls; None means the real network."""
    return None


def _internal_error() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse().model_dump(),
    )


@router.post(
    "/chat",
    responses={500: {"model": ErrorResponse, "description": "Relay failed before streaming"}},
)
async def relay_chat(
    request: Request,
    transport: httpx.AsyncBaseTransport | None = Depends(get_upstream_transport),
) -> Response:
    """Relay a conversation to the provider and stream the reply.

    Every failure that happens before the stream starts (unreadable body,
    missing credential, provider rejection, connection failure) yields the
    same generic 500 body. The provider's own status and body are never
    forwarded.

    Args:
        request: Incoming request with a JSON body ``{"messages": [...]}``.
        transport: Outbound transport override.

    Returns:
        StreamingResponse of reply fragments, or a 500 JSON error.
    """
    try:
        payload = ChatRequest.model_validate_json(await request.body())
        upstream = UpstreamClient(get_relay_config(), transport=transport)
    except Exception as e:
        logger.error(f"Rejected chat request: {e}")
        return _internal_error()

    try:
        response = await upstream.open_stream(payload.messages)
    except Exception as e:
        await upstream.aclose()
        logger.error(f"Error in chat relay: {e}")
        return _internal_error()
    except BaseException:
        await asyncio.shield(upstream.aclose())
        raise

    logger.info(f"Relaying reply for conversation of {len(payload.messages)} turns")
    relay = StreamRelay(upstream, response)
    return StreamingResponse(
        relay.body(),
        media_type=STREAM_MEDIA_TYPE,
        background=BackgroundTask(relay.aclose),
    )
