"""Knowledge retrieval for a chat turn.

Components:
    - RetrievalStep: top-k passage lookup and normalization
    - SimilaritySearch: protocol of the search collaborator
    - KnowledgeSearch: Agno/LanceDB implementation (ragchat.retrieval.knowledge)
"""

from ragchat.retrieval.step import (
    RetrievalError,
    RetrievalStep,
    SimilaritySearch,
    build_source_block,
    format_sources,
    normalize_text,
)

__all__ = [
    "RetrievalError",
    "RetrievalStep",
    "SimilaritySearch",
    "build_source_block",
    "format_sources",
    "normalize_text",
]
