"""Client application state and the pure reducers that update it.

The page never mutates state in place. Every change goes through a reducer
returning a new ``ChatState``; ``StateStore`` applies reducers and hands the
result to its listeners (persistence, rendering).
"""

import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from chatrelay.models.schemas import ChatTurn

CONNECTION_ERROR_MESSAGE = (
    "⚠️ **Connection Error**\n\n"
    "Unable to reach the server. Please check your connection and try again."
)

Theme = Literal["dark", "light"]
Accent = Literal["blue", "purple", "emerald", "rose", "amber"]
FontSize = Literal["text-sm", "text-[15px]", "text-lg", "text-xl"]

ACCENT_COLORS: dict[str, tuple[str, str]] = {
    "blue": ("#60a5fa", "#2563eb"),
    "purple": ("#c084fc", "#9333ea"),
    "emerald": ("#34d399", "#059669"),
    "rose": ("#fb7185", "#e11d48"),
    "amber": ("#fbbf24", "#d97706"),
}

FONT_SIZES: dict[str, str] = {
    "text-sm": "Small",
    "text-[15px]": "Normal",
    "text-lg": "Large",
    "text-xl": "Extra Large",
}

REACTION_EMOJIS = ["❤️", "😂", "😮", "😢", "👏", "🔥", "⭐", "👍"]


def _now() -> datetime:
    return datetime.now(UTC)


class StoredTurn(BaseModel):
    """A conversation turn plus the metadata the client keeps for it."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: str
    content: str
    created_at: datetime = Field(default_factory=_now)
    reactions: tuple[str, ...] = ()

    def to_wire(self) -> ChatTurn:
        return ChatTurn(role=self.role, content=self.content)


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    theme: Theme = "dark"
    accent: Accent = "blue"
    font_size: FontSize = "text-[15px]"


class ChatState(BaseModel):
    """Everything the chat page renders.

    Attributes:
        messages: The conversation, oldest first.
        settings: Appearance preferences.
        is_streaming: True while a reply is being streamed into the last turn.
    """

    model_config = ConfigDict(frozen=True)

    messages: tuple[StoredTurn, ...] = ()
    settings: Settings = Field(default_factory=Settings)
    is_streaming: bool = False


def _replace_turn(state: ChatState, index: int, turn: StoredTurn) -> ChatState:
    messages = list(state.messages)
    messages[index] = turn
    return state.model_copy(update={"messages": tuple(messages)})


def _start_reply(state: ChatState, content: str) -> ChatState:
    user_turn = StoredTurn(role="user", content=content)
    reply = StoredTurn(role="assistant", content="")
    return state.model_copy(
        update={"messages": (*state.messages, user_turn, reply), "is_streaming": True}
    )


def submit_message(state: ChatState, text: str) -> ChatState:
    """Append a user turn and an empty assistant turn to stream into.

    Blank input, or a submit while a reply is still streaming, is ignored.
    """
    text = text.strip()
    if not text or state.is_streaming:
        return state
    return _start_reply(state, text)


def resend_turn(state: ChatState, index: int) -> ChatState:
    """Send the content of turn ``index`` again as a new user turn.

    Earlier turns, including the one being resent, stay as they are.
    """
    if state.is_streaming:
        return state
    return _start_reply(state, state.messages[index].content)


def append_fragment(state: ChatState, text: str) -> ChatState:
    """Append streamed text to the in-flight assistant turn."""
    if not state.messages or not text:
        return state
    last = state.messages[-1]
    return _replace_turn(
        state, -1, last.model_copy(update={"content": last.content + text})
    )


def finish_reply(state: ChatState) -> ChatState:
    return state.model_copy(update={"is_streaming": False})


def fail_reply(state: ChatState) -> ChatState:
    """Replace the in-flight reply with the fixed connection error message."""
    if not state.messages:
        return finish_reply(state)
    last = state.messages[-1].model_copy(update={"content": CONNECTION_ERROR_MESSAGE})
    return finish_reply(_replace_turn(state, -1, last))


def edit_turn(state: ChatState, index: int, content: str) -> ChatState:
    turn = state.messages[index].model_copy(update={"content": content})
    return _replace_turn(state, index, turn)


def toggle_reaction(state: ChatState, index: int, emoji: str) -> ChatState:
    turn = state.messages[index]
    if emoji in turn.reactions:
        reactions = tuple(r for r in turn.reactions if r != emoji)
    else:
        reactions = (*turn.reactions, emoji)
    return _replace_turn(state, index, turn.model_copy(update={"reactions": reactions}))


def clear_conversation(state: ChatState) -> ChatState:
    return state.model_copy(update={"messages": (), "is_streaming": False})


def toggle_theme(state: ChatState) -> ChatState:
    theme = "light" if state.settings.theme == "dark" else "dark"
    return state.model_copy(
        update={"settings": state.settings.model_copy(update={"theme": theme})}
    )


def set_accent(state: ChatState, accent: Accent) -> ChatState:
    return state.model_copy(
        update={"settings": state.settings.model_copy(update={"accent": accent})}
    )


def set_font_size(state: ChatState, font_size: FontSize) -> ChatState:
    return state.model_copy(
        update={"settings": state.settings.model_copy(update={"font_size": font_size})}
    )


def conversation_for_request(state: ChatState) -> list[ChatTurn]:
    """Turns to send to the relay: everything before the in-flight reply."""
    messages = state.messages
    if state.is_streaming and messages and messages[-1].role == "assistant":
        messages = messages[:-1]
    return [turn.to_wire() for turn in messages]


Listener = Callable[[ChatState], None]


class StateStore:
    """Holds the current state and notifies listeners after each change."""

    def __init__(self, state: ChatState | None = None) -> None:
        self.state = state or ChatState()
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def apply(self, reducer: Callable[..., ChatState], *args) -> ChatState:
        new_state = reducer(self.state, *args)
        if new_state is not self.state:
            self.state = new_state
            for listener in self._listeners:
                listener(new_state)
        return self.state
