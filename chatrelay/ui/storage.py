"""Per-browser persistence of the chat state.

Values are stored JSON-encoded under fixed keys in a mapping, which on the
page is NiceGUI's ``app.storage.user``.
"""

import json
import logging
from collections.abc import MutableMapping
from typing import Any

from pydantic import TypeAdapter, ValidationError

from chatrelay.ui.state import ChatState, Settings, StoredTurn

logger = logging.getLogger(__name__)

MESSAGES_KEY = "chat_messages"
THEME_KEY = "chat_theme"
ACCENT_KEY = "chat_accent"
FONT_SIZE_KEY = "chat_fontSize"

_turns_adapter = TypeAdapter(tuple[StoredTurn, ...])


class ChatStorage:
    """Loads and saves ``ChatState`` under the fixed storage keys."""

    def __init__(self, backend: MutableMapping[str, Any]) -> None:
        self._backend = backend

    def _read(self, key: str) -> Any:
        raw = self._backend.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, json.JSONDecodeError):
            logger.warning(f"Discarding unreadable value stored under {key}")
            return None

    def load(self) -> ChatState:
        """Build state from storage, falling back to defaults per key."""
        defaults = Settings()
        messages: tuple[StoredTurn, ...] = ()
        stored_messages = self._read(MESSAGES_KEY)
        if stored_messages:
            try:
                messages = _turns_adapter.validate_python(stored_messages)
            except ValidationError as e:
                logger.warning(f"Discarding stored conversation: {e}")

        settings = {
            "theme": self._read(THEME_KEY) or defaults.theme,
            "accent": self._read(ACCENT_KEY) or defaults.accent,
            "font_size": self._read(FONT_SIZE_KEY) or defaults.font_size,
        }
        try:
            parsed_settings = Settings.model_validate(settings)
        except ValidationError as e:
            logger.warning(f"Discarding stored settings: {e}")
            parsed_settings = defaults

        # A reply cut off by a closed tab is never resumed
        return ChatState(messages=messages, settings=parsed_settings)

    def save(self, state: ChatState) -> None:
        self._backend[MESSAGES_KEY] = json.dumps(
            [turn.model_dump(mode="json") for turn in state.messages]
        )
        self._backend[THEME_KEY] = json.dumps(state.settings.theme)
        self._backend[ACCENT_KEY] = json.dumps(state.settings.accent)
        self._backend[FONT_SIZE_KEY] = json.dumps(state.settings.font_size)
