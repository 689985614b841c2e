"""Pydantic models for a chat turn.

Provides type safety and validation for the data flowing through one turn.

Models:
    - ChatMessage: Individual message in conversation
    - SearchHit: Raw document returned by the similarity search
    - RetrievedPassage: Normalized passage injected into the prompt
    - ChatCompletionResult: Completion plus evidence and debug trace
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MessageRole(str, Enum):
    """Speaker of a chat message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """A single chat message in the conversation.

    Attributes:
        role: The speaker identifier (user, assistant, or system).
        content: The message text.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    role: MessageRole = Field(..., description="Message role: 'user', 'assistant', or 'system'")
    content: str = Field(..., description="The message content")


class SearchHit(BaseModel):
    """A document returned by the similarity search collaborator.

    Attributes:
        content: Raw document text, possibly spanning several lines.
        metadata: Document metadata; ``source`` names the originating file.
    """

    model_config = ConfigDict(frozen=True)

    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class RetrievedPassage(BaseModel):
    """A retrieved passage ready to be listed as a source line.

    Attributes:
        source_id: Identifier of the originating document, kept verbatim.
        text: Passage text with line breaks collapsed to spaces.
    """

    model_config = ConfigDict(frozen=True)

    source_id: str
    text: str

    @field_validator("text")
    @classmethod
    def reject_line_breaks(cls, v: str) -> str:
        """Keep one source per line in the formatted source block."""
        if "\n" in v or "\r" in v:
            raise ValueError("Passage text must not contain line breaks")
        return v

    def format(self) -> str:
        """Render the passage as a ``source: text`` line."""
        return f"{self.source_id}: {self.text}"


class ChatCompletionResult(BaseModel):
    """Outcome of one chat turn.

    Attributes:
        message: The assistant's generated answer.
        context_data: Formatted source lines the answer was grounded on.
        trace: Human-readable debug trace, single line.
    """

    model_config = ConfigDict(frozen=True)

    message: ChatMessage
    context_data: list[str] = Field(default_factory=list)
    trace: str = ""
