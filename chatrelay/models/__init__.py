"""Pydantic models for API requests and responses.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - ChatTurn: Individual turn in the conversation
    - ChatRequest: Incoming chat relay payload
    - CompletionRequest: Outbound payload for the upstream provider
    - CompletionChunk: One decoded upstream stream event
    - ErrorResponse: Generic failure body
"""

from chatrelay.models.schemas import (
    ChatRequest,
    ChatTurn,
    CompletionChunk,
    CompletionRequest,
    ErrorResponse,
)

__all__ = [
    "ChatRequest",
    "ChatTurn",
    "CompletionChunk",
    "CompletionRequest",
    "ErrorResponse",
]
