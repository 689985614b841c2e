"""Chat model invocation through Agno.

Wraps an Agno model so the orchestrator only sees ``invoke(messages)``.
Model parameters are fixed when the model is created.
"""

import logging
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from agno.models.base import Model
from agno.models.message import Message
from agno.models.openai import OpenAIChat

from ragchat.agent.config import AgentConfig
from ragchat.agent.credentials import TokenProvider
from ragchat.models import ChatMessage

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """Raised when the chat model call fails."""

    pass


@runtime_checkable
class ChatGenerator(Protocol):
    """Anything that turns a prompt into a single assistant reply."""

    async def invoke(self, messages: Sequence[ChatMessage]) -> str: ...


def create_chat_model(config: AgentConfig, token_provider: TokenProvider) -> OpenAIChat:
    """Create the Agno chat model.

    Args:
        config: Agent configuration with model parameters.
        token_provider: Source of the API key.

    Returns:
        Configured OpenAIChat instance.

    Raises:
        AuthError: If the token provider cannot produce a key.
    """
    endpoint = config.base_url or "OpenAI default endpoint"
    logger.info(f"Using model {config.model_name} at {endpoint}")
    return OpenAIChat(
        id=config.model_name,
        api_key=token_provider.get_token(),
        base_url=config.base_url,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        request_params={"n": config.completion_count},
    )


class AgnoChatGenerator:
    """Generates replies with an Agno model."""

    def __init__(self, model: Model) -> None:
        self._model = model

    async def invoke(self, messages: Sequence[ChatMessage]) -> str:
        """Send the prompt to the model and return the reply text.

        Args:
            messages: Ordered prompt messages.

        Returns:
            Reply text, empty when the model returned no content.
        """
        agno_messages = [Message(role=m.role, content=m.content) for m in messages]
        response = await self._model.aresponse(messages=agno_messages)
        return response.content or ""
