"""Semantic park search formatted for language-model consumption."""

import logging
from typing import List

from components.embedding_system import EmbeddingGenerator
from components.vector_store import ParkSearchResult, ParkVectorStore

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No park information found for that query."

SEARCH_TOOL_NAME = "search_parks"
SEARCH_TOOL_DESCRIPTION = (
    "Search national park information by natural language query. Returns "
    "relevant park details including name, code, state, and content."
)
QUERY_DESCRIPTION = "The search query about national parks"


def format_results(results: List[ParkSearchResult]) -> str:
    """Render search hits as one markdown block per park, in the given order."""
    if not results:
        return NO_RESULTS_MESSAGE

    blocks = []
    for result in results:
        blocks.append(
            f"## {result.name} ({result.code}) - {result.region}  "
            f"[score: {result.score:.3f}]\n"
            f"{result.content}\n"
            "\n"
        )
    return "".join(blocks)


class SearchTool:
    """Embeds a query, searches the park collection and formats the hits."""

    def __init__(
        self,
        embedding_generator: EmbeddingGenerator,
        vector_store: ParkVectorStore,
        limit: int = 5,
    ):
        self.embedding_generator = embedding_generator
        self.vector_store = vector_store
        self.limit = limit

    async def search(self, query: str) -> str:
        """
        Runs a cosine similarity search for a natural-language query.

        Args:
            query: The user's search query.

        Returns:
            The formatted results, or the no-results message when nothing matched.
        """
        embeddings = await self.embedding_generator.generate([query])
        results = await self.vector_store.search(embeddings[0], limit=self.limit)
        logger.info(f"Park search for '{query}' returned {len(results)} results")
        return format_results(results)
