"""Export of the conversation as a downloadable file."""

import json
from collections.abc import Sequence
from datetime import date
from typing import Literal

from chatrelay.ui.state import StoredTurn

ExportFormat = Literal["json", "txt"]

SEPARATOR = "-" * 50


def to_json(messages: Sequence[StoredTurn]) -> str:
    """Pretty-printed JSON list of the stored turns."""
    return json.dumps(
        [turn.model_dump(mode="json") for turn in messages],
        indent=2,
        ensure_ascii=False,
    )


def to_text(messages: Sequence[StoredTurn]) -> str:
    """Plain-text transcript: role, local timestamp, content, separator."""
    blocks = []
    for turn in messages:
        timestamp = turn.created_at.astimezone().strftime("%Y-%m-%d %H:%M:%S")
        blocks.append(f"{turn.role.upper()} [{timestamp}]:\n{turn.content}\n{SEPARATOR}")
    return "\n\n".join(blocks)


def export_conversation(
    messages: Sequence[StoredTurn],
    fmt: ExportFormat,
    today: date | None = None,
) -> tuple[str, str]:
    """Render the conversation for download.

    Args:
        messages: Turns to export.
        fmt: ``json`` or ``txt``.
        today: Date used in the file name; defaults to the current date.

    Returns:
        Tuple of (filename, content).
    """
    today = today or date.today()
    content = to_json(messages) if fmt == "json" else to_text(messages)
    return f"chat-export-{today.isoformat()}.{fmt}", content
