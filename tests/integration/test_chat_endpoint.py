"""Integration tests for the chat completion endpoint.

Exercises the FastAPI app through httpx AsyncClient and ASGITransport with
in-memory collaborators, so no model provider or knowledge base is needed.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import pytest
import pytest_check as check
from httpx import ASGITransport, AsyncClient

from ragchat.agent.chat_service import TRACE_LINE_BREAK, ChatOrchestrator
from ragchat.api.app import create_app
from ragchat.models.schemas import ChatResponse
from tests.conftest import FakeGenerator, FakeSearch, FixedCostAccountant


@asynccontextmanager
async def _client_for(orchestrator: ChatOrchestrator | None) -> AsyncGenerator[AsyncClient]:
    transport = ASGITransport(app=create_app(orchestrator=orchestrator))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestChatEndpoint:
    """Integration tests for POST /chat."""

    async def test_returns_completion_with_context(self, async_client: AsyncClient) -> None:
        """Response carries the answer, the sources and the trace."""
        response = await async_client.post(
            "/chat",
            json={"messages": [{"role": "user", "content": "What is the refund policy?"}]},
        )

        assert response.status_code == 200

        data = ChatResponse.model_validate(response.json())
        check.equal(data.message.role, "assistant")
        check.equal(data.message.content, "Refunds are accepted within 30 days [terms.txt].")
        check.equal(data.context.data_points, ["terms.txt: Refunds within 30 days"])
        check.is_true(data.context.thoughts.startswith(f"Search query:{TRACE_LINE_BREAK}"))

    async def test_response_shape(self, async_client: AsyncClient) -> None:
        """The JSON body uses the chat protocol field names."""
        response = await async_client.post(
            "/chat",
            json={"messages": [{"role": "user", "content": "Refunds?"}]},
        )

        body = response.json()
        assert set(body) == {"message", "context"}
        assert set(body["message"]) == {"role", "content"}
        assert set(body["context"]) == {"data_points", "thoughts"}

    async def test_history_is_forwarded(
        self, async_client: AsyncClient, fake_generator: FakeGenerator
    ) -> None:
        """Earlier turns reach the model after the augmented question."""
        await async_client.post(
            "/chat",
            json={
                "messages": [
                    {"role": "user", "content": "Hello"},
                    {"role": "assistant", "content": "Hi, how can I help?"},
                    {"role": "user", "content": "Refunds?"},
                ]
            },
        )

        prompt = fake_generator.prompts[0]
        assert [m.content for m in prompt[2:]] == ["Hi, how can I help?", "Hello"]

    async def test_empty_messages_returns_422(self, async_client: AsyncClient) -> None:
        """A conversation needs at least one message."""
        response = await async_client.post("/chat", json={"messages": []})

        assert response.status_code == 422

    async def test_missing_messages_returns_422(self, async_client: AsyncClient) -> None:
        """Missing messages field triggers validation error."""
        response = await async_client.post("/chat", json={})

        assert response.status_code == 422

    async def test_unknown_role_returns_422(self, async_client: AsyncClient) -> None:
        """Only system, user and assistant roles are accepted."""
        response = await async_client.post(
            "/chat",
            json={"messages": [{"role": "tool", "content": "Refunds?"}]},
        )

        assert response.status_code == 422

    async def test_wrong_http_method_returns_405(self, async_client: AsyncClient) -> None:
        """GET request to POST endpoint returns 405 Method Not Allowed."""
        response = await async_client.get("/chat")

        assert response.status_code == 405

    async def test_health(self, async_client: AsyncClient) -> None:
        """Health endpoint reports the service as healthy."""
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "rag-chat"}


class TestChatEndpointErrors:
    """Tests for collaborator failures surfacing over HTTP."""

    @pytest.fixture
    async def failing_search_client(self) -> AsyncGenerator[AsyncClient]:
        orchestrator = ChatOrchestrator(
            FakeSearch(error=ConnectionError("search service unavailable")),
            FakeGenerator(),
            model_name="test-model",
            accountant=FixedCostAccountant(),
        )
        async with _client_for(orchestrator) as client:
            yield client

    @pytest.fixture
    async def failing_model_client(self) -> AsyncGenerator[AsyncClient]:
        orchestrator = ChatOrchestrator(
            FakeSearch(),
            FakeGenerator(error=RuntimeError("rate limited")),
            model_name="test-model",
            accountant=FixedCostAccountant(),
        )
        async with _client_for(orchestrator) as client:
            yield client

    @pytest.fixture
    async def unconfigured_client(self) -> AsyncGenerator[AsyncClient]:
        async with _client_for(None) as client:
            yield client

    async def test_retrieval_failure_returns_502(self, failing_search_client: AsyncClient) -> None:
        """Knowledge base failures fail the whole turn."""
        response = await failing_search_client.post(
            "/chat",
            json={"messages": [{"role": "user", "content": "Refunds?"}]},
        )

        assert response.status_code == 502
        assert response.json() == {"detail": "Knowledge base search failed"}

    async def test_generation_failure_returns_502(self, failing_model_client: AsyncClient) -> None:
        """Model failures fail the whole turn."""
        response = await failing_model_client.post(
            "/chat",
            json={"messages": [{"role": "user", "content": "Refunds?"}]},
        )

        assert response.status_code == 502
        assert response.json() == {"detail": "Model provider request failed"}

    async def test_missing_orchestrator_returns_503(self, unconfigured_client: AsyncClient) -> None:
        """Requests before the orchestrator is configured are rejected."""
        response = await unconfigured_client.post(
            "/chat",
            json={"messages": [{"role": "user", "content": "Refunds?"}]},
        )

        assert response.status_code == 503

    async def test_cors_headers_present(self, async_client: AsyncClient) -> None:
        """Response includes CORS headers for cross-origin requests."""
        response = await async_client.post(
            "/chat",
            json={"messages": [{"role": "user", "content": "Refunds?"}]},
            headers={"Origin": "http://localhost:3000"},
        )

        assert "access-control-allow-origin" in response.headers
