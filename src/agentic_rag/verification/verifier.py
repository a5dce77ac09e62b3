"""Answer verification: three model-scored axes, a weighted confidence, one correction pass."""

from __future__ import annotations

import asyncio
import math
import re

from agentic_rag.config.constants import (
    ISSUE_LOW_COHERENCE,
    ISSUE_LOW_RELEVANCE,
    ISSUE_POSSIBLE_HALLUCINATION,
    NEUTRAL_SCORE,
    NO_CONTEXT_HALLUCINATION_SCORE,
)
from agentic_rag.config.settings import Settings
from agentic_rag.generation.llm_calls import call_structured, call_text
from agentic_rag.generation.prompt_templates import (
    COHERENCE_PROMPT,
    COHERENCE_SYSTEM,
    CORRECTION_PROMPT,
    CORRECTION_SYSTEM,
    HALLUCINATION_PROMPT,
    HALLUCINATION_SYSTEM,
    NO_CONTEXT,
    RELEVANCE_PROMPT,
    RELEVANCE_SYSTEM,
)
from agentic_rag.models.domain import VerificationResult
from agentic_rag.models.schemas import ScoreResponse
from agentic_rag.observability.logger import get_logger
from agentic_rag.observability.metrics import log_verification_metrics
from agentic_rag.protocols.llm import LLMProvider

logger = get_logger("verifier")

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")


def clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def bounded_score(value: float) -> float | None:
    """Clamp a model score to [0, 1]; NaN and infinities count as unparsable."""
    if not math.isfinite(value):
        return None
    return clamp(value)


def parse_score(text: str | None) -> float | None:
    """First number in the text, clamped to [0, 1]; None when there is none."""
    if not text:
        return None
    match = _NUMBER.search(text)
    if match is None:
        return None
    try:
        return bounded_score(float(match.group()))
    except ValueError:
        return None


class Verifier:
    def __init__(self, llm: LLMProvider, settings: Settings) -> None:
        self._llm = llm
        self._settings = settings

    async def verify(self, question: str, answer: str, context: str | None) -> VerificationResult:
        s = self._settings
        has_context = bool(context and context.strip())
        ctx = context[: s.verify_context_chars] if has_context else ""
        ans = (answer or "")[: s.verify_answer_chars]

        coherence, non_hallucination, relevance = await asyncio.gather(
            self._coherence(ans, ctx) if has_context else _constant(NEUTRAL_SCORE),
            self._non_hallucination(ans, ctx)
            if has_context
            else _constant(NO_CONTEXT_HALLUCINATION_SCORE),
            self._relevance(question, ans),
        )

        confidence = clamp(
            s.verify_w_coherence * coherence
            + s.verify_w_hallucination * non_hallucination
            + s.verify_w_relevance * relevance
        )

        issues: list[str] = []
        if coherence < s.coherence_issue_threshold:
            issues.append(ISSUE_LOW_COHERENCE)
        if non_hallucination < s.hallucination_issue_threshold:
            issues.append(ISSUE_POSSIBLE_HALLUCINATION)
        if relevance < s.relevance_issue_threshold:
            issues.append(ISSUE_LOW_RELEVANCE)

        needs_correction = confidence < s.confidence_threshold or bool(issues)
        log_verification_metrics(coherence, non_hallucination, relevance, confidence, issues)

        corrected = None
        if needs_correction:
            corrected = await self.correct(question, answer, context, issues)

        return VerificationResult(
            confidence=confidence,
            needs_correction=needs_correction,
            issues=issues,
            corrected_answer=corrected,
            coherence=coherence,
            non_hallucination=non_hallucination,
            relevance=relevance,
        )

    async def correct(
        self, question: str, answer: str, context: str | None, issues: list[str]
    ) -> str | None:
        """One correction call; None when it fails so the original answer stands."""
        s = self._settings
        issues_text = ", ".join(issues) if issues else "low confidence"
        prompt = CORRECTION_PROMPT.format(
            issues=issues_text,
            question=question,
            context=context[: s.verify_context_chars] if context else NO_CONTEXT,
            answer=(answer or "")[: s.verify_answer_chars],
        )
        result = await call_text(
            self._llm,
            prompt,
            system=CORRECTION_SYSTEM.format(language=s.response_language),
            timeout=s.llm_timeout_seconds,
            stage="correction",
        )
        if not result.ok or not result.value.strip():
            logger.warning("correction_failed", error=result.error)
            return None
        logger.info("answer_corrected", issues=issues, corrected_chars=len(result.value))
        return result.value.strip()

    async def _coherence(self, answer: str, context: str) -> float:
        return await self._score(
            COHERENCE_PROMPT.format(context=context, answer=answer),
            COHERENCE_SYSTEM,
            "coherence",
        )

    async def _non_hallucination(self, answer: str, context: str) -> float:
        return await self._score(
            HALLUCINATION_PROMPT.format(context=context, answer=answer),
            HALLUCINATION_SYSTEM,
            "hallucination",
        )

    async def _relevance(self, question: str, answer: str) -> float:
        return await self._score(
            RELEVANCE_PROMPT.format(question=question, answer=answer),
            RELEVANCE_SYSTEM,
            "relevance",
        )

    async def _score(self, prompt: str, system: str, axis: str) -> float:
        timeout = self._settings.llm_timeout_seconds
        structured = await call_structured(
            self._llm, prompt, ScoreResponse, system=system, timeout=timeout, stage=axis
        )
        if structured.ok:
            score = bounded_score(structured.value.score)
            error = None if score is not None else f"non-finite score {structured.value.score}"
        elif structured.timed_out:
            score, error = None, structured.error
        else:
            text = await call_text(self._llm, prompt, system=system, timeout=timeout, stage=axis)
            score = parse_score(text.value) if text.ok else None
            error = text.error
        if score is None:
            logger.warning("verification_axis_failed", axis=axis, error=error)
            score = NEUTRAL_SCORE

        logger.info("verification_scored", axis=axis, score=round(score, 4))
        return score


async def _constant(value: float) -> float:
    return value
