"""Integration tests for components working together as a system.

Coverage:
    - API endpoints with real HTTP requests through ASGITransport
    - Request validation and error mapping
    - Full chat turn from request to response

Knowledge search and chat model are in-memory fakes, so no API keys or
external services are required.
"""
