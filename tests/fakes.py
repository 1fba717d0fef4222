"""Test doubles for the upstream chat-completion provider."""

import json
from collections.abc import AsyncIterator

import httpx

TEST_API_KEY = "sk-test-key"
DONE_LINE = b"data: [DONE]\n\n"


def data_line(content: str) -> bytes:
    """Encode one provider event carrying ``content`` as its delta."""
    payload = {"choices": [{"delta": {"content": content}}]}
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n".encode()


class FakeProvider:
    """Stands in for the upstream chat-completion API.

    Records every request and answers with ``status_code`` and a body
    streamed chunk by chunk, optionally failing after the last chunk.
    """

    def __init__(
        self,
        chunks: list[bytes] | None = None,
        status_code: int = 200,
        error: Exception | None = None,
        connect_error: bool = False,
    ) -> None:
        if chunks is None:
            chunks = [data_line("Hel"), data_line("lo"), DONE_LINE]
        self.chunks = chunks
        self.status_code = status_code
        self.error = error
        self.connect_error = connect_error
        self.requests: list[httpx.Request] = []

    async def _body(self) -> AsyncIterator[bytes]:
        for chunk in self.chunks:
            yield chunk
        if self.error is not None:
            raise self.error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.connect_error:
            raise httpx.ConnectError("Connection refused", request=request)
        return httpx.Response(self.status_code, content=self._body())

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)
