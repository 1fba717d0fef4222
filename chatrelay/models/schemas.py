from pydantic import BaseModel, Field


class ChatTurn(BaseModel):
    """A single turn of the conversation as it travels over the wire.

    Attributes:
        role: The speaker identifier (user, assistant, or system).
        content: The message text.
    """

    role: str = Field(..., description="Message role: 'user', 'assistant', or 'system'")
    content: str = Field(..., description="The message content")


class ChatRequest(BaseModel):
    """Request payload for the chat relay endpoint.

    Attributes:
        messages: Ordered conversation, oldest turn first.
    """

    messages: list[ChatTurn]


class CompletionRequest(BaseModel):
    """Body of the outbound streaming chat-completion call."""

    model: str
    messages: list[ChatTurn]
    stream: bool = True


class ChunkDelta(BaseModel):
    content: str | None = None


class ChunkChoice(BaseModel):
    delta: ChunkDelta = Field(default_factory=ChunkDelta)


class CompletionChunk(BaseModel):
    """JSON payload carried by one upstream ``data:`` line."""

    choices: list[ChunkChoice] = Field(default_factory=list)

    def first_delta(self) -> str | None:
        """Return the incremental text of the first choice, if any."""
        if not self.choices:
            return None
        return self.choices[0].delta.content


class ErrorResponse(BaseModel):
    """Body returned when the relay fails before streaming begins."""

    error: str = "Internal server error"
