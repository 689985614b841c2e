"""Chat completion endpoint.

Runs one retrieval-augmented turn over the posted conversation. The
orchestrator is read from application state, set up by the app factory.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ragchat.agent.chat_service import ChatOrchestrator
from ragchat.agent.generation import GenerationError
from ragchat.models.schemas import ChatRequest, ChatResponse
from ragchat.retrieval import RetrievalError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


def get_chat_orchestrator(request: Request) -> ChatOrchestrator:
    """Return the orchestrator attached to the application.

    Raises:
        HTTPException: 503 if the orchestrator is not configured.
    """
    orchestrator = getattr(request.app.state, "chat_orchestrator", None)
    if orchestrator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Chat service is not configured",
        )
    return orchestrator


@router.post("", response_model=ChatResponse)
async def chat(
    chat_request: ChatRequest,
    orchestrator: ChatOrchestrator = Depends(get_chat_orchestrator),
) -> ChatResponse:
    """Answer the last message of a conversation.

    Args:
        chat_request: Conversation, oldest first.
        orchestrator: Injected chat orchestrator.

    Returns:
        ChatResponse with the assistant message, sources and debug trace.

    Raises:
        422: Empty or malformed conversation.
        502: Knowledge base or model provider failure.
    """
    try:
        result = await orchestrator.run(chat_request.messages)
    except RetrievalError as e:
        logger.warning(f"Retrieval failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Knowledge base search failed",
        ) from e
    except GenerationError as e:
        logger.warning(f"Generation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Model provider request failed",
        ) from e

    return ChatResponse.from_result(result)
