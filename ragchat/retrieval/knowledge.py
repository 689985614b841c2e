"""Similarity search backed by an Agno knowledge base.

Wraps Agno's ``Knowledge`` over a LanceDB table. The table is populated by a
separate ingestion process; this adapter only reads from it.
"""

import logging
from pathlib import Path

from agno.knowledge.knowledge import Knowledge
from agno.vectordb.lancedb import LanceDb

from ragchat.models import SearchHit

logger = logging.getLogger(__name__)


def create_knowledge(knowledge_dir: str | Path, table_name: str = "documents") -> Knowledge:
    """Create the LanceDB-backed knowledge base used for retrieval.

    Args:
        knowledge_dir: Directory of the LanceDB database.
        table_name: Table holding the indexed documents.

    Returns:
        Configured Knowledge instance.
    """
    knowledge_dir = Path(knowledge_dir)
    knowledge_dir.mkdir(parents=True, exist_ok=True)

    vector_db = LanceDb(
        uri=str(knowledge_dir),
        table_name=table_name,
    )

    logger.info(f"Using knowledge base at {knowledge_dir} (table {table_name})")
    return Knowledge(vector_db=vector_db)


class KnowledgeSearch:
    """Similarity search over an Agno knowledge base."""

    def __init__(self, knowledge: Knowledge) -> None:
        self._knowledge = knowledge

    async def similarity_search(self, query: str, k: int) -> list[SearchHit]:
        """Return the k documents most relevant to the query.

        The source of each hit comes from the document metadata, or the
        document name when the metadata has none.
        """
        documents = await self._knowledge.asearch(query=query, max_results=k)

        hits: list[SearchHit] = []
        for document in documents:
            metadata = dict(document.meta_data or {})
            if not metadata.get("source") and document.name:
                metadata["source"] = document.name
            hits.append(SearchHit(content=document.content or "", metadata=metadata))
        return hits
