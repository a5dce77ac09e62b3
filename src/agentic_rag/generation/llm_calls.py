"""Bounded, failure-explicit wrappers around the generation service.

Every stage talks to the LLM through these helpers. A call either yields a
value or a ``StageResult`` carrying the failure, so each stage decides its own
default instead of relying on exceptions bubbling through the pipeline.
"""

from __future__ import annotations

import asyncio

from pydantic import BaseModel

from agentic_rag.models.domain import StageResult
from agentic_rag.observability.logger import get_logger
from agentic_rag.protocols.llm import LLMProvider

logger = get_logger("llm_calls")


async def call_text(
    llm: LLMProvider,
    prompt: str,
    *,
    system: str | None = None,
    timeout: float | None = None,
    stage: str = "generation",
) -> StageResult[str]:
    try:
        text = await asyncio.wait_for(llm.generate(prompt, system=system), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("llm_call_timeout", stage=stage, timeout=timeout)
        return StageResult.failure(f"{stage} timed out after {timeout}s", timed_out=True)
    except Exception as e:
        logger.warning("llm_call_failed", stage=stage, error=str(e))
        return StageResult.failure(str(e))

    if text is None:
        return StageResult.failure(f"{stage} returned no text")
    return StageResult.success(text)


async def call_structured(
    llm: LLMProvider,
    prompt: str,
    schema: type[BaseModel],
    *,
    system: str | None = None,
    timeout: float | None = None,
    stage: str = "generation",
) -> StageResult[BaseModel]:
    try:
        result = await asyncio.wait_for(
            llm.generate_structured(prompt, schema, system=system), timeout=timeout
        )
    except asyncio.TimeoutError:
        logger.warning("llm_structured_timeout", stage=stage, timeout=timeout)
        return StageResult.failure(f"{stage} timed out after {timeout}s", timed_out=True)
    except Exception as e:
        # Structured output is optional; callers fall back to free text unless it timed out
        logger.debug("llm_structured_unavailable", stage=stage, error=str(e))
        return StageResult.failure(str(e))

    if not isinstance(result, schema):
        return StageResult.failure(f"{stage} returned {type(result).__name__}")
    return StageResult.success(result)
