"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Chat message display with progressive streaming
    - Explicit client state updated only through pure reducers
    - Per-browser persistence of conversation, theme, accent and font size
    - Export of the conversation as JSON or a plain-text transcript

Talks to the relay over HTTP only; holds no provider credentials.
"""
