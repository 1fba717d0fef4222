"""Unit tests for individual components in isolation.

Ensures fast execution with minimal dependencies.

Coverage:
    - relay/: Event parsing, channel semantics, upstream client, config
    - ui/: State reducers, persistence and export

Follows single responsibility per test function. Leverages pytest-check for
multiple assertions per test.
"""
