"""Metric recording helpers for traces."""

from __future__ import annotations

from agentic_rag.observability.logger import get_logger

logger = get_logger("metrics")


def log_retrieval_metrics(
    strategy: str,
    passages: int,
    top_scores: list[float],
    context_chars: int,
) -> None:
    logger.info(
        "retrieval_metrics",
        strategy=strategy,
        passages=passages,
        top_scores=[round(s, 4) for s in top_scores[:5]],
        context_chars=context_chars,
    )


def log_verification_metrics(
    coherence: float,
    non_hallucination: float,
    relevance: float,
    confidence: float,
    issues: list[str],
) -> None:
    logger.info(
        "verification_metrics",
        coherence=round(coherence, 4),
        non_hallucination=round(non_hallucination, 4),
        relevance=round(relevance, 4),
        confidence=round(confidence, 4),
        issues=issues,
    )


def log_pipeline_metrics(
    trace_id: str,
    route: str,
    confidence: float,
    was_corrected: bool,
    stages: dict[str, float],
    latency_ms: float,
) -> None:
    logger.info(
        "pipeline_metrics",
        trace_id=trace_id,
        route=route,
        confidence=round(confidence, 4),
        was_corrected=was_corrected,
        stages=stages,
        latency_ms=round(latency_ms, 2),
    )
