"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ragchat import __version__
from ragchat.agent.chat_service import ChatOrchestrator, build_chat_orchestrator
from ragchat.api.chat import router as chat_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Builds the chat orchestrator from the environment unless one was
    injected when the app was created.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    # Startup
    logger.info("Starting RAG Chat API...")
    if getattr(app.state, "chat_orchestrator", None) is None:
        app.state.chat_orchestrator = build_chat_orchestrator()
    yield
    # Shutdown
    logger.info("Shutting down RAG Chat API...")


def create_app(orchestrator: ChatOrchestrator | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        orchestrator: Optional chat orchestrator. Built from the environment
                      on startup if not provided.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="RAG Chat API",
        description=(
            "Retrieval-augmented chat completions. Retrieves relevant knowledge "
            "passages for the latest question, assembles a token-bounded prompt "
            "with the conversation history, and returns the model's answer with "
            "its sources and a debug trace."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.chat_orchestrator = orchestrator

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "rag-chat"}

    return application


app = create_app()
