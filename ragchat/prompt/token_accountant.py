"""Token cost estimation for chat messages.

Counts are produced with tiktoken. The exact tokenizer only needs to be
consistent within a turn so that running totals are comparable against a
fixed ceiling.
"""

import logging
from collections.abc import Callable
from functools import lru_cache

import tiktoken

logger = logging.getLogger(__name__)

# Framing tokens charged per chat message by the chat completions format
MESSAGE_OVERHEAD = 3
FALLBACK_ENCODING = "cl100k_base"


@lru_cache(maxsize=16)
def get_encoding(model_name: str) -> tiktoken.Encoding:
    """Return the tiktoken encoding for a model.

    Args:
        model_name: Model identifier, e.g. ``gpt-4o-mini``.

    Returns:
        The model's encoding, or ``cl100k_base`` for models tiktoken
        does not know about.
    """
    try:
        return tiktoken.encoding_for_model(model_name)
    except KeyError:
        logger.debug(f"No tiktoken encoding for {model_name}, using {FALLBACK_ENCODING}")
        return tiktoken.get_encoding(FALLBACK_ENCODING)


class TokenAccountant:
    """Estimates the token cost of chat messages.

    Pure and deterministic: identical input always yields the same count.
    """

    def __init__(
        self,
        model_name: str,
        tokenizer: Callable[[str], int] | None = None,
    ) -> None:
        """Initialize the accountant.

        Args:
            model_name: Model whose tokenizer is used for counting.
            tokenizer: Optional callable returning the token count of a text.
                       Defaults to the model's tiktoken encoding.
        """
        self.model_name = model_name
        self._tokenizer = tokenizer

    def count(self, text: str | None) -> int:
        """Count tokens in a bare text. Empty text costs nothing."""
        if not text:
            return 0
        if self._tokenizer is not None:
            return max(0, self._tokenizer(text))
        # Special-token text such as <|endoftext|> is counted as plain text
        return len(get_encoding(self.model_name).encode_ordinary(text))

    def estimate(self, role: str, content: str | None) -> int:
        """Estimate the cost of one message in a prompt.

        Args:
            role: Message role.
            content: Message text; ``None`` or empty costs only the framing.

        Returns:
            Non-negative token count.
        """
        return MESSAGE_OVERHEAD + self.count(role) + self.count(content)
