"""Retrieval step: fetch and normalize the passages for a query.

The similarity search itself is an injected collaborator. This module only
preserves its ranking, keeps source identifiers verbatim, and flattens the
passage text so every source fits on one line.
"""

import logging
import re
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ragchat.models import RetrievedPassage, SearchHit

logger = logging.getLogger(__name__)

UNKNOWN_SOURCE = "unknown"

_LINE_BREAKS = re.compile(r"[\n\r]+")


class RetrievalError(Exception):
    """Raised when the similarity search collaborator fails."""

    pass


@runtime_checkable
class SimilaritySearch(Protocol):
    """Anything that returns the k documents most relevant to a query."""

    async def similarity_search(self, query: str, k: int) -> Sequence[SearchHit]: ...


def normalize_text(text: str) -> str:
    """Collapse each run of line-break characters into a single space."""
    return _LINE_BREAKS.sub(" ", text)


def format_sources(passages: Sequence[RetrievedPassage]) -> list[str]:
    """Render passages as ``source: text`` lines, keeping their order."""
    return [passage.format() for passage in passages]


def build_source_block(passages: Sequence[RetrievedPassage]) -> str:
    """Join the formatted passages into a newline-separated source block."""
    return "\n".join(format_sources(passages))


class RetrievalStep:
    """Queries the knowledge store for the passages relevant to a question."""

    def __init__(self, search: SimilaritySearch) -> None:
        self._search = search

    async def retrieve(self, query: str, k: int) -> list[RetrievedPassage]:
        """Retrieve the top-k passages for a query.

        Args:
            query: The user's question.
            k: Number of passages to request.

        Returns:
            Passages in the collaborator's relevance order.

        Raises:
            RetrievalError: If the similarity search fails. Not retried.
        """
        try:
            hits = await self._search.similarity_search(query, k)
        except Exception as e:
            logger.error(f"Similarity search failed: {e}")
            raise RetrievalError(f"Similarity search failed: {e}") from e

        passages = [
            RetrievedPassage(
                source_id=str(hit.metadata.get("source") or UNKNOWN_SOURCE),
                text=normalize_text(hit.content),
            )
            for hit in hits
        ]
        logger.debug(f"Retrieved {len(passages)} passages for query")
        return passages
