"""Interpret the question and shape the context handed to answer generation."""

from __future__ import annotations

from agentic_rag.config.constants import (
    DEFAULT_INTENT,
    DEFAULT_RESPONSE_TEMPLATE,
    UNKNOWN_INTENT,
)
from agentic_rag.config.settings import Settings
from agentic_rag.generation.llm_calls import call_text
from agentic_rag.generation.prompt_templates import (
    COMMON_INSTRUCTIONS,
    DATABASE_SECTION_TITLE,
    DOCUMENT_ONLY_INSTRUCTIONS,
    DOCUMENT_SECTION_TITLE,
    INSTRUCTIONS_SECTION_TITLE,
    INTENT_PROMPT,
    INTENT_SYSTEM,
    KEY_POINTS_PROMPT,
    KEY_POINTS_SYSTEM,
    MIXED_INSTRUCTIONS,
    TEMPLATE_PROMPT,
    TEMPLATE_SYSTEM,
    TOOL_ONLY_INSTRUCTIONS,
)
from agentic_rag.models.domain import StructuredContext
from agentic_rag.observability.logger import get_logger
from agentic_rag.protocols.llm import LLMProvider

logger = get_logger("context_structurer")

KEY_POINTS_CONTEXT_CHARS = 2000


def build_structured_body(rag_context: str | None, tool_result: str | None) -> str:
    """Lay out whichever sources are present, followed by source-specific instructions."""
    has_docs = bool(rag_context and rag_context.strip())
    has_tool = bool(tool_result and tool_result.strip())

    sections: list[str] = []
    if has_docs:
        sections.append(f"{DOCUMENT_SECTION_TITLE}\n{rag_context.strip()}")
    if has_tool:
        sections.append(f"{DATABASE_SECTION_TITLE}\n{tool_result.strip()}")

    if has_docs and not has_tool:
        instructions = DOCUMENT_ONLY_INSTRUCTIONS
    elif has_tool and not has_docs:
        instructions = TOOL_ONLY_INSTRUCTIONS
    else:
        # Routing is exclusive, so both sources at once only happens if routing changes
        instructions = MIXED_INSTRUCTIONS
    lines = [f"- {line}" for line in (*instructions, *COMMON_INSTRUCTIONS)]
    sections.append(INSTRUCTIONS_SECTION_TITLE + "\n" + "\n".join(lines))

    return "\n\n".join(sections)


class ContextStructurer:
    def __init__(self, llm: LLMProvider, settings: Settings) -> None:
        self._llm = llm
        self._settings = settings

    async def interpret_and_structure(
        self,
        question: str,
        rag_context: str | None,
        tool_result: str | None,
    ) -> StructuredContext:
        try:
            intent = await self._extract_intent(question)
            body = build_structured_body(rag_context, tool_result)
            key_points = await self._extract_key_points(question, rag_context, tool_result)
            template = await self._suggest_template(intent, key_points)
        except Exception as e:
            logger.error("structuring_failed", error=str(e))
            return StructuredContext(
                intent=UNKNOWN_INTENT,
                body=rag_context or tool_result or "",
                key_points="",
                response_template=DEFAULT_RESPONSE_TEMPLATE,
            )

        logger.info(
            "context_structured",
            intent=intent,
            body_chars=len(body),
            has_key_points=bool(key_points),
        )
        return StructuredContext(
            intent=intent,
            body=body,
            key_points=key_points,
            response_template=template,
        )

    async def _extract_intent(self, question: str) -> str:
        result = await call_text(
            self._llm,
            INTENT_PROMPT.format(question=question),
            system=INTENT_SYSTEM,
            timeout=self._settings.llm_timeout_seconds,
            stage="intent",
        )
        if not result.ok or not result.value.strip():
            logger.warning("intent_extraction_failed", error=result.error)
            return DEFAULT_INTENT
        return result.value.strip()

    async def _extract_key_points(
        self, question: str, rag_context: str | None, tool_result: str | None
    ) -> str:
        if rag_context:
            context = rag_context[:KEY_POINTS_CONTEXT_CHARS]
        elif tool_result:
            context = tool_result
        else:
            return ""

        result = await call_text(
            self._llm,
            KEY_POINTS_PROMPT.format(question=question, context=context),
            system=KEY_POINTS_SYSTEM,
            timeout=self._settings.llm_timeout_seconds,
            stage="key_points",
        )
        if not result.ok:
            logger.warning("key_points_extraction_failed", error=result.error)
            return ""
        return result.value.strip()

    async def _suggest_template(self, intent: str, key_points: str) -> str:
        result = await call_text(
            self._llm,
            TEMPLATE_PROMPT.format(intent=intent, key_points=key_points),
            system=TEMPLATE_SYSTEM,
            timeout=self._settings.llm_timeout_seconds,
            stage="response_template",
        )
        if not result.ok or not result.value.strip():
            logger.warning("template_suggestion_failed", error=result.error)
            return DEFAULT_RESPONSE_TEMPLATE
        return result.value.strip()
