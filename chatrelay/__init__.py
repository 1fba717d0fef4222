"""Chat Relay - browser chat client streaming replies from a hosted LLM.

Combines FastAPI for HTTP streaming, httpx for the upstream provider call,
NiceGUI for the chat interface, and Pydantic for data validation.

Components:
    - api: HTTP endpoints and streaming responses
    - relay: Upstream call and event-stream to text-stream transform
    - ui: Chat interface, client state, persistence and export
    - models: Request/response schemas
"""

__version__ = "0.1.0"
