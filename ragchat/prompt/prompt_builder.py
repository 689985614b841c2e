"""Ordered prompt assembly under a token budget.

The builder keeps the system message first and tracks a running token total
so the caller can roll back the last appended message when a ceiling is
exceeded. Exporting the messages finalizes the builder.
"""

import logging

from ragchat.models import ChatMessage, MessageRole
from ragchat.prompt.token_accountant import TokenAccountant

logger = logging.getLogger(__name__)


class PromptFinalizedError(RuntimeError):
    """Raised when a finalized prompt is mutated."""

    pass


class PromptBuilder:
    """Builds the message list submitted to the chat model.

    Messages are kept in append order. The system message is always the
    first entry and is never removed.
    """

    def __init__(
        self,
        system_prompt: str,
        model_name: str,
        accountant: TokenAccountant | None = None,
    ) -> None:
        """Initialize with the system message as the first entry.

        Args:
            system_prompt: Instruction placed in the system message.
            model_name: Model identifier, used to pick the tokenizer.
            accountant: Optional token accountant. Defaults to one for
                        ``model_name``.
        """
        self.model_name = model_name
        self._accountant = accountant or TokenAccountant(model_name)
        self._messages: list[ChatMessage] = []
        self._costs: list[int] = []
        self._tokens = 0
        self._finalized = False
        self._push(MessageRole.SYSTEM.value, system_prompt)

    @property
    def tokens(self) -> int:
        """Running token total of the messages currently held."""
        return self._tokens

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        """Read-only view of the current messages. Does not finalize."""
        return tuple(self._messages)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def append_message(self, role: str, content: str) -> None:
        """Append a message and charge its cost to the running total.

        Raises:
            PromptFinalizedError: If the messages were already exported.
        """
        self._ensure_building()
        self._push(role, content)

    def pop_message(self) -> bool:
        """Remove the most recently appended message.

        Returns:
            True if a message was removed, False if only the system
            message is left.

        Raises:
            PromptFinalizedError: If the messages were already exported.
        """
        self._ensure_building()
        if len(self._messages) <= 1:
            return False
        removed = self._messages.pop()
        cost = self._costs.pop()
        self._tokens -= cost
        logger.debug(f"Popped {removed.role} message ({cost} tokens), total now {self._tokens}")
        return True

    def get_messages(self) -> list[ChatMessage]:
        """Export the messages for the chat model and finalize the builder."""
        self._finalized = True
        return list(self._messages)

    def _push(self, role: str, content: str) -> None:
        cost = self._accountant.estimate(role, content)
        self._messages.append(ChatMessage(role=role, content=content))
        self._costs.append(cost)
        self._tokens += cost

    def _ensure_building(self) -> None:
        if self._finalized:
            raise PromptFinalizedError("Prompt was already exported and can no longer change")
