"""FastAPI endpoints for the chat relay.

HTTP and streaming routes with async request handling.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Stream a reply for a conversation as plain text
"""

from chatrelay.api.app import app, create_app

__all__ = ["app", "create_app"]
