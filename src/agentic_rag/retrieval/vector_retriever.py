"""Progressive similarity search with a fixed fallback ladder.

Each rung is a separate search; the first non-empty result set wins:

1. the question embedding at each configured score threshold;
2. the question embedding at threshold 0 with a widened result cap;
3. one search per salient keyword of the question;
4. one search per generic domain term, cue-specific terms first;
5. the question embedding at a permissive negative floor.

Retrieval never raises. A missing embedder or index, a failed or timed-out
embedding, and a failed or timed-out search all count as "no results".
"""

from __future__ import annotations

import asyncio
import re

from agentic_rag.config.constants import (
    COURSE_CUES,
    COURSE_GENERIC_TERMS,
    DATA_CUES,
    DATA_GENERIC_TERMS,
    GENERIC_TERMS,
    KEYWORD_MIN_LENGTH,
    RETRIEVAL_STOPWORDS,
)
from agentic_rag.config.settings import Settings
from agentic_rag.generation.prompt_templates import format_passage_block
from agentic_rag.models.domain import RetrievedPassage
from agentic_rag.observability.logger import get_logger
from agentic_rag.observability.metrics import log_retrieval_metrics
from agentic_rag.protocols.embedder import Embedder
from agentic_rag.protocols.similarity_search import SimilaritySearch

logger = get_logger("vector_retriever")


def extract_keywords(text: str) -> list[str]:
    """Lowercase, strip punctuation, keep distinct non-stopword tokens longer than 3 chars."""
    text = text.lower()
    text = re.sub(r"[^\w\s]", " ", text)
    keywords: list[str] = []
    for token in text.split():
        if len(token) > KEYWORD_MIN_LENGTH and token not in RETRIEVAL_STOPWORDS:
            if token not in keywords:
                keywords.append(token)
    return keywords


def generic_terms_for(question: str) -> list[str]:
    """Generic broadening terms, with the cue-specific subset first."""
    q = question.lower()
    preferred: tuple[str, ...] = ()
    if any(cue in q for cue in DATA_CUES):
        preferred = DATA_GENERIC_TERMS
    elif any(cue in q for cue in COURSE_CUES):
        preferred = COURSE_GENERIC_TERMS
    terms: list[str] = []
    for term in (*preferred, *GENERIC_TERMS):
        if term not in terms:
            terms.append(term)
    return terms


class VectorRetriever:
    def __init__(
        self,
        embedder: Embedder | None,
        store: SimilaritySearch | None,
        settings: Settings,
    ) -> None:
        self._embedder = embedder
        self._store = store
        self._settings = settings

    @property
    def embedder_available(self) -> bool:
        return self._embedder is not None

    @property
    def available(self) -> bool:
        return self._embedder is not None and self._store is not None

    async def search(self, question: str) -> str:
        """Return the formatted document context, or "" when nothing was found."""
        passages, strategy = await self.retrieve(question)
        if not passages:
            logger.warning("retrieval_miss", strategy=strategy)
            return ""

        context = format_passage_block(passages, max_chars=self._settings.passage_max_chars)
        log_retrieval_metrics(
            strategy=strategy,
            passages=len(passages),
            top_scores=[p.score for p in passages],
            context_chars=len(context),
        )
        return context

    async def retrieve(self, question: str) -> tuple[list[RetrievedPassage], str]:
        """Walk the fallback ladder; return the first hit and the rung that produced it."""
        if not self.available:
            logger.warning("retrieval_unavailable")
            return [], "unavailable"

        s = self._settings
        query_embedding = await self._embed(question)

        if query_embedding is not None:
            for threshold in s.retriever_score_thresholds:
                passages = await self._find(query_embedding, s.retriever_max_results, threshold)
                if passages:
                    return self._hit(passages, f"threshold:{threshold}")

            passages = await self._find(query_embedding, s.retriever_widened_max_results, 0.0)
            if passages:
                return self._hit(passages, "widened")

        for keyword in extract_keywords(question):
            passages = await self._search_text(keyword, s.retriever_keyword_max_results)
            if passages:
                return self._hit(passages, f"keyword:{keyword}")

        for term in generic_terms_for(question):
            passages = await self._search_text(term, s.retriever_generic_max_results)
            if passages:
                return self._hit(passages, f"generic:{term}")

        if query_embedding is not None:
            passages = await self._find(
                query_embedding,
                s.retriever_fallback_max_results,
                s.retriever_fallback_min_score,
            )
            if passages:
                return self._hit(passages, "fallback")

        return [], "exhausted"

    async def _search_text(self, text: str, max_results: int) -> list[RetrievedPassage]:
        embedding = await self._embed(text)
        if embedding is None:
            return []
        return await self._find(embedding, max_results, 0.0)

    async def _embed(self, text: str) -> list[float] | None:
        try:
            return await asyncio.wait_for(
                self._embedder.embed(text),
                timeout=self._settings.embedding_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning("retrieval_embed_timeout", text=text[:80])
            return None
        except Exception as e:
            logger.warning("retrieval_embed_failed", text=text[:80], error=str(e))
            return None

    async def _find(
        self, embedding: list[float], max_results: int, min_score: float
    ) -> list[RetrievedPassage]:
        try:
            passages = await asyncio.wait_for(
                self._store.find_relevant(embedding, max_results, min_score),
                timeout=self._settings.search_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning("retrieval_search_timeout", max_results=max_results, min_score=min_score)
            return []
        except Exception as e:
            logger.warning(
                "retrieval_search_failed",
                max_results=max_results,
                min_score=min_score,
                error=str(e),
            )
            return []
        return list(passages or [])

    @staticmethod
    def _hit(
        passages: list[RetrievedPassage], strategy: str
    ) -> tuple[list[RetrievedPassage], str]:
        # Stable sort: equal scores keep the order the index returned them in
        ordered = sorted(passages, key=lambda p: p.score, reverse=True)
        ranked = [
            RetrievedPassage(text=p.text, score=p.score, rank=i)
            for i, p in enumerate(ordered, start=1)
        ]
        logger.info("retrieval_hit", strategy=strategy, passages=len(ranked))
        return ranked, strategy
