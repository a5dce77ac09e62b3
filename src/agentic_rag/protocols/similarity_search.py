"""Protocol for the similarity index consumed by retrieval."""

from __future__ import annotations

from typing import Protocol

from agentic_rag.models.domain import RetrievedPassage


class SimilaritySearch(Protocol):
    async def find_relevant(
        self,
        query_embedding: list[float],
        max_results: int,
        min_score: float,
    ) -> list[RetrievedPassage]:
        """Return passages scoring at least ``min_score``, best first."""
        ...

    @property
    def size(self) -> int: ...
