"""LLM orchestration for retrieval-augmented chat.

Responsibilities:
    - Configuration loading from the environment
    - Credential acquisition for the model provider
    - Chat model invocation through Agno
    - The end-to-end chat turn (ChatOrchestrator)

Maintains clean separation from the HTTP layer.
"""

from ragchat.agent.chat_service import ChatOrchestrator, build_chat_orchestrator
from ragchat.agent.config import AgentConfig, get_agent_config
from ragchat.agent.credentials import ApiKeyProvider, AuthError
from ragchat.agent.generation import AgnoChatGenerator, ChatGenerator, GenerationError

__all__ = [
    "AgentConfig",
    "AgnoChatGenerator",
    "ApiKeyProvider",
    "AuthError",
    "ChatGenerator",
    "ChatOrchestrator",
    "GenerationError",
    "build_chat_orchestrator",
    "get_agent_config",
]
