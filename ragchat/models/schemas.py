"""Request and response schemas for the chat endpoint.

Follows the chat protocol shape: the request carries the whole conversation,
the response carries the answer plus a ``context`` object with the sources
and the debug trace.
"""

from pydantic import BaseModel, Field

from ragchat.models import ChatCompletionResult, ChatMessage


class ChatRequest(BaseModel):
    """Request payload for chat completion endpoint.

    Attributes:
        messages: Conversation, oldest first. The last message is the question.
    """

    messages: list[ChatMessage] = Field(..., min_length=1)


class ChatContext(BaseModel):
    """Evidence and diagnostics attached to a completion.

    Attributes:
        data_points: Source lines injected into the prompt.
        thoughts: Debug trace of the search query and assembled prompt.
    """

    data_points: list[str] = Field(default_factory=list)
    thoughts: str = ""


class ChatResponse(BaseModel):
    """Response from the chatbot with source attribution.

    Attributes:
        message: The assistant's generated answer.
        context: Sources and debug trace for this turn.
    """

    message: ChatMessage
    context: ChatContext

    @classmethod
    def from_result(cls, result: ChatCompletionResult) -> "ChatResponse":
        """Build the wire response from an orchestrator result."""
        return cls(
            message=result.message,
            context=ChatContext(
                data_points=list(result.context_data),
                thoughts=result.trace,
            ),
        )
