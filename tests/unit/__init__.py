"""Unit tests for individual components in isolation.

Coverage:
    - prompt/: Token accounting and prompt assembly
    - retrieval/: Passage normalization and knowledge search adapter
    - agent/: Configuration, credentials, generation and the chat turn

Uses mocks for external services. Leverages pytest-check for multiple
assertions per test.
"""
