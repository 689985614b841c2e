"""Pytest fixtures and shared test configuration.

Provides in-memory stand-ins for the chat turn's collaborators so tests run
without a knowledge base, a model provider, or tokenizer downloads.

Fixtures:
    - fake_search: Similarity search returning canned hits
    - fake_generator: Chat model recording the prompts it receives
    - word_accountant: Accountant counting whitespace-separated words
    - orchestrator: ChatOrchestrator wired to the fakes
    - async_client: HTTPX client for API testing
"""

from collections.abc import AsyncGenerator, Sequence

import pytest
from httpx import ASGITransport, AsyncClient

from ragchat.agent.chat_service import ChatOrchestrator
from ragchat.api.app import create_app
from ragchat.models import ChatMessage, SearchHit
from ragchat.prompt import TokenAccountant


class FakeSearch:
    """Similarity search returning a fixed list of hits."""

    def __init__(self, hits: list[SearchHit] | None = None, error: Exception | None = None) -> None:
        self.hits = hits or []
        self.error = error
        self.calls: list[tuple[str, int]] = []

    async def similarity_search(self, query: str, k: int) -> list[SearchHit]:
        self.calls.append((query, k))
        if self.error is not None:
            raise self.error
        return self.hits[:k]


class FakeGenerator:
    """Chat model that records prompts and returns a canned reply."""

    def __init__(
        self,
        reply: str = "Refunds are accepted within 30 days [terms.txt].",
        error: Exception | None = None,
    ) -> None:
        self.reply = reply
        self.error = error
        self.prompts: list[list[ChatMessage]] = []

    async def invoke(self, messages: Sequence[ChatMessage]) -> str:
        self.prompts.append(list(messages))
        if self.error is not None:
            raise self.error
        return self.reply


class FixedCostAccountant(TokenAccountant):
    """Accountant charging a fixed cost per role, or a per-content override."""

    def __init__(self, costs: dict[str, int] | None = None, default: int = 10) -> None:
        super().__init__("test-model", tokenizer=lambda text: len(text.split()))
        self.costs = costs or {}
        self.default = default

    def estimate(self, role: str, content: str | None) -> int:
        return self.costs.get(content or "", self.costs.get(role, self.default))


@pytest.fixture
def refund_hits() -> list[SearchHit]:
    """Return a single search hit for the refund policy."""
    return [SearchHit(content="Refunds\nwithin 30 days", metadata={"source": "terms.txt"})]


@pytest.fixture
def fake_search(refund_hits: list[SearchHit]) -> FakeSearch:
    """Return a similarity search stand-in with one refund hit."""
    return FakeSearch(refund_hits)


@pytest.fixture
def fake_generator() -> FakeGenerator:
    """Return a chat model stand-in."""
    return FakeGenerator()


@pytest.fixture
def word_accountant() -> TokenAccountant:
    """Return an accountant counting words instead of BPE tokens."""
    return TokenAccountant("test-model", tokenizer=lambda text: len(text.split()))


@pytest.fixture
def orchestrator(
    fake_search: FakeSearch,
    fake_generator: FakeGenerator,
    word_accountant: TokenAccountant,
) -> ChatOrchestrator:
    """Return an orchestrator wired to the fakes."""
    return ChatOrchestrator(
        fake_search,
        fake_generator,
        model_name="test-model",
        accountant=word_accountant,
    )


@pytest.fixture
async def async_client(orchestrator: ChatOrchestrator) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=create_app(orchestrator=orchestrator))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
