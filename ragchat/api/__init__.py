"""FastAPI endpoints for the RAG chat service.

Endpoints:
    - GET /health: Service health status
    - POST /chat: Chat completion requests
"""

from ragchat.api.app import app, create_app

__all__ = ["app", "create_app"]
