"""Agent configuration with environment variable loading.

Pydantic-based configuration for the chat orchestrator.
Supports OpenAI and OpenAI-compatible APIs via custom base URL.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


class AgentConfig(BaseModel):
    """Configuration for the chat orchestrator.

    Supports OpenAI and any OpenAI-compatible API via LLM_BASE_URL.

    Attributes:
        api_key: API key for model access. Checked by the token provider.
        base_url: API base URL (None for OpenAI default).
        model_name: Model identifier to use.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        max_tokens: Maximum tokens in generated response.
        completion_count: Number of completions requested per call.
        top_k: Number of passages retrieved per turn.
        token_limit: Token ceiling for the assembled prompt.
        knowledge_dir: Directory of the LanceDB knowledge base.
        knowledge_table: LanceDB table holding the documents.
        allow_dummy_credentials: Fall back to a dummy API key instead of
            failing when no key is configured.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("LLM_API_KEY", os.getenv("OPENAI_API_KEY", "")),
        description="API key for LLM provider",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or None,
        description="API base URL (None for OpenAI default)",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o-mini"),
        description="Model to use",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    max_tokens: int = Field(
        default=1024,
        ge=1,
        le=128000,
        description="Maximum tokens in generated response",
    )
    completion_count: int = Field(
        default=1,
        ge=1,
        description="Number of completions per request",
    )
    top_k: int = Field(
        default=3,
        ge=1,
        description="Passages retrieved per turn",
    )
    token_limit: int = Field(
        default=4000,
        ge=1,
        description="Token ceiling for the assembled prompt",
    )
    knowledge_dir: str = Field(
        default_factory=lambda: os.getenv("KNOWLEDGE_DIR", "data/knowledge"),
        description="LanceDB directory of the knowledge base",
    )
    knowledge_table: str = Field(
        default="documents",
        description="LanceDB table holding the indexed documents",
    )
    allow_dummy_credentials: bool = Field(
        default_factory=lambda: _env_flag("ALLOW_DUMMY_CREDENTIALS"),
        description="Use a dummy API key when none is configured",
    )

    @field_validator("api_key")
    @classmethod
    def strip_api_key(cls, v: str) -> str:
        """Strip surrounding whitespace from the API key."""
        return v.strip()


def get_agent_config() -> AgentConfig:
    """Create agent configuration from environment.

    Returns:
        Configured AgentConfig instance.

    Raises:
        ValidationError: If an environment value is out of range.
    """
    return AgentConfig()
