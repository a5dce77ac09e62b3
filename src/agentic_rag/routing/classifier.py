"""Keyword-based routing between the document corpus and the transaction store."""

from __future__ import annotations

from agentic_rag.config.constants import DOCUMENT_KEYWORDS, TRANSACTION_KEYWORDS
from agentic_rag.models.domain import Route
from agentic_rag.observability.logger import get_logger

logger = get_logger("classifier")


class QuestionClassifier:
    def __init__(
        self,
        document_keywords: tuple[str, ...] = DOCUMENT_KEYWORDS,
        transaction_keywords: tuple[str, ...] = TRANSACTION_KEYWORDS,
    ) -> None:
        self._document_keywords = document_keywords
        self._transaction_keywords = transaction_keywords

    def classify(self, question: str | None) -> Route:
        """Route a question to DOCUMENT or TRANSACTION.

        Each keyword found as a substring counts once. Documents win ties as
        long as at least one document keyword matched; a question with no
        keyword at all defaults to TRANSACTION.
        """
        if question is None or not question.strip():
            logger.info("route_classified", route=Route.TRANSACTION.value, reason="blank")
            return Route.TRANSACTION

        q = question.lower().strip()
        document_score = self._count(q, self._document_keywords)
        transaction_score = self._count(q, self._transaction_keywords)
        logger.debug(
            "route_scores",
            document_score=document_score,
            transaction_score=transaction_score,
        )

        if document_score > 0 and document_score >= transaction_score:
            route = Route.DOCUMENT
        else:
            route = Route.TRANSACTION

        logger.info(
            "route_classified",
            route=route.value,
            document_score=document_score,
            transaction_score=transaction_score,
        )
        return route

    @staticmethod
    def _count(question: str, keywords: tuple[str, ...]) -> int:
        return sum(1 for kw in keywords if kw in question)
