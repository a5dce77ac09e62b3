"""End-to-end question answering: route, gather context, reason, verify."""

from __future__ import annotations

from agentic_rag.config.constants import (
    DOCUMENTS_UNAVAILABLE_INTENT,
    DOCUMENTS_UNAVAILABLE_MESSAGE,
    ERROR_INTENT,
    PIPELINE_ERROR_MESSAGE,
)
from agentic_rag.config.settings import Settings
from agentic_rag.generation.prompt_templates import format_generation_context
from agentic_rag.models.domain import ChatMessage, OrchestrationResult, Route
from agentic_rag.observability.logger import get_logger
from agentic_rag.observability.metrics import log_pipeline_metrics
from agentic_rag.observability.tracing import TraceContext
from agentic_rag.reasoning.context_structurer import ContextStructurer
from agentic_rag.reasoning.react_loop import ReasoningLoop
from agentic_rag.retrieval.vector_retriever import VectorRetriever
from agentic_rag.routing.classifier import QuestionClassifier
from agentic_rag.tools.tool_invoker import ToolInvoker
from agentic_rag.verification.verifier import Verifier

logger = get_logger("orchestrator")


class Orchestrator:
    def __init__(
        self,
        classifier: QuestionClassifier,
        retriever: VectorRetriever,
        tool_invoker: ToolInvoker,
        structurer: ContextStructurer,
        reasoning_loop: ReasoningLoop,
        verifier: Verifier,
        settings: Settings,
    ) -> None:
        self._classifier = classifier
        self._retriever = retriever
        self._tools = tool_invoker
        self._structurer = structurer
        self._reasoning = reasoning_loop
        self._verifier = verifier
        self._settings = settings

    async def orchestrate(
        self, question: str, history: list[ChatMessage] | None = None
    ) -> OrchestrationResult:
        """Never raises, except on cancellation: failures become a zero-confidence result."""
        trace = TraceContext()
        try:
            return await self._run(question, history, trace)
        except Exception as e:
            logger.error(
                "orchestration_failed",
                trace_id=trace.trace_id,
                error=str(e),
                exc_info=True,
            )
            return OrchestrationResult(
                final_answer=PIPELINE_ERROR_MESSAGE,
                confidence=0.0,
                was_corrected=False,
                intent=ERROR_INTENT,
                trace_id=trace.trace_id,
            )

    async def _run(
        self,
        question: str,
        history: list[ChatMessage] | None,
        trace: TraceContext,
    ) -> OrchestrationResult:
        logger.info("orchestration_started", trace_id=trace.trace_id, question=question[:200])

        # STEP 1: Routing
        with trace.span("classification"):
            route = self._classifier.classify(question)

        # STEP 2: Exactly one knowledge source per question
        rag_context = ""
        tool_result: str | None = None
        if route is Route.DOCUMENT:
            with trace.span("retrieval"):
                rag_context = await self._retriever.search(question)
            if not rag_context:
                return self._documents_unavailable(route, trace)
        else:
            with trace.span("tools"):
                tool_result = await self._tools.execute_tools(question)

        # STEP 3: Structuring
        with trace.span("structuring"):
            structured = await self._structurer.interpret_and_structure(
                question, rag_context, tool_result
            )

        # STEP 4: Think-Act-Observe
        with trace.span("reasoning"):
            answer = await self._reasoning.react(
                question,
                format_generation_context(
                    structured.body, structured.key_points, structured.response_template
                ),
                history=history,
            )

        # STEP 5: Verification and correction
        with trace.span("verification"):
            verification = await self._verifier.verify(question, answer, structured.body)

        final_answer = answer
        was_corrected = False
        if verification.needs_correction and verification.corrected_answer:
            final_answer = verification.corrected_answer
            was_corrected = True

        log_pipeline_metrics(
            trace_id=trace.trace_id,
            route=route.value,
            confidence=verification.confidence,
            was_corrected=was_corrected,
            stages=trace.stage_durations(),
            latency_ms=trace.elapsed_ms,
        )
        return OrchestrationResult(
            final_answer=final_answer,
            confidence=verification.confidence,
            was_corrected=was_corrected,
            intent=structured.intent,
            route=route,
            issues=list(verification.issues),
            trace_id=trace.trace_id,
        )

    def _documents_unavailable(self, route: Route, trace: TraceContext) -> OrchestrationResult:
        logger.warning("documents_unavailable", trace_id=trace.trace_id)
        log_pipeline_metrics(
            trace_id=trace.trace_id,
            route=route.value,
            confidence=0.0,
            was_corrected=False,
            stages=trace.stage_durations(),
            latency_ms=trace.elapsed_ms,
        )
        return OrchestrationResult(
            final_answer=DOCUMENTS_UNAVAILABLE_MESSAGE,
            confidence=0.0,
            was_corrected=False,
            intent=DOCUMENTS_UNAVAILABLE_INTENT,
            route=route,
            trace_id=trace.trace_id,
        )
