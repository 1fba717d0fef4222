"""Integration tests for components working together as a system.

Coverage:
    - Relay endpoint with real HTTP requests through ASGITransport
    - UI streaming client consuming the relay
    - Client state flow from submit to finished reply

The upstream provider is faked at the transport level, so these tests need
no API key and no network.
"""
