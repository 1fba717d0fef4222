"""Test package for Chat Relay.

Unit tests for isolated logic and integration tests for workflows.

Structure:
    - unit/: Event parsing, relay channel, config, client state
    - integration/: Relay endpoint and UI client over ASGITransport
    - fakes.py: Fake upstream provider built on httpx.MockTransport

Leverages pytest with pytest-check for soft assertions.
"""
