"""Credential acquisition for the chat model.

A token provider either produces a token or raises ``AuthError``. Falling
back to a dummy key is opt-in so misconfiguration fails fast by default.
"""

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

DUMMY_API_KEY = "__dummy"


class AuthError(Exception):
    """Raised when no usable credential can be produced."""

    pass


@runtime_checkable
class TokenProvider(Protocol):
    """Anything that produces an auth token for the model provider."""

    def get_token(self) -> str: ...


class ApiKeyProvider:
    """Provides a static API key from configuration."""

    def __init__(self, api_key: str | None, allow_dummy: bool = False) -> None:
        """Initialize the provider.

        Args:
            api_key: Configured API key, may be empty.
            allow_dummy: Return ``DUMMY_API_KEY`` instead of raising when
                         the key is missing.
        """
        self._api_key = (api_key or "").strip()
        self._allow_dummy = allow_dummy

    def get_token(self) -> str:
        """Return the API key.

        Raises:
            AuthError: If no key is configured and dummy keys are not allowed.
        """
        if self._api_key:
            return self._api_key

        if self._allow_dummy:
            logger.warning("No LLM API key configured, using dummy key")
            return DUMMY_API_KEY

        raise AuthError("API key required. Set LLM_API_KEY or OPENAI_API_KEY in .env")
