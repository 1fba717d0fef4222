"""Upstream event-stream parsing.

Turns the provider's ``data:``-prefixed stream into text fragments. Nothing in
here touches the network: ``parse_event_line`` classifies a single line and
``iter_fragments`` runs it over the lines httpx decodes from the body
(``Response.aiter_lines``), which already keeps split lines and multi-byte
characters intact across chunks.
"""

import logging
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass

from pydantic import ValidationError

from chatrelay.models.schemas import CompletionChunk

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


@dataclass(frozen=True, slots=True)
class Fragment:
    """Incremental reply text extracted from one event."""

    text: str


@dataclass(frozen=True, slots=True)
class Ignored:
    """A line carrying nothing to relay."""

    reason: str


@dataclass(frozen=True, slots=True)
class Sentinel:
    """End-of-stream marker sent by the provider."""


LineResult = Fragment | Ignored | Sentinel


def parse_event_line(line: str) -> LineResult:
    """Classify one line of the upstream stream.

    Args:
        line: A single line without its terminator.

    Returns:
        Fragment when the line carries non-empty delta content, Sentinel for
        ``data: [DONE]`` and Ignored for everything else (blank lines,
        comments, malformed JSON, events without content).
    """
    if not line.startswith(DATA_PREFIX):
        return Ignored("not a data line")

    data = line[len(DATA_PREFIX):]
    if data == DONE_SENTINEL:
        return Sentinel()

    try:
        chunk = CompletionChunk.model_validate_json(data)
    except ValidationError:
        return Ignored("malformed payload")

    content = chunk.first_delta()
    if not content:
        return Ignored("no delta content")
    return Fragment(content)


async def iter_fragments(lines: AsyncIterable[str]) -> AsyncIterator[str]:
    """Yield reply fragments from decoded body lines, in arrival order."""
    async for line in lines:
        match parse_event_line(line):
            case Fragment(text=text):
                yield text
            case Ignored(reason=reason) if line:
                logger.debug(f"Ignored upstream line ({reason}): {line[:80]!r}")
            case Sentinel() | Ignored():
                continue
