"""Bounded Think-Act-Observe loop over a fixed context.

Each iteration asks the model to THINK (answer, clarify or search more). An
ANSWER decision generates the final answer; CLARIFY returns a clarification
request without another model call; anything else goes through OBSERVE,
which may replace the working context or trigger the answer. The loop always
ends with an answer: at the iteration bound one is forced, and every parse or
model failure along the way resolves to ANSWER.
"""

from __future__ import annotations

from agentic_rag.config.constants import ANSWER_FAILED_MESSAGE, CLARIFICATION_PREFIX
from agentic_rag.config.settings import Settings
from agentic_rag.generation.llm_calls import call_structured, call_text
from agentic_rag.generation.prompt_templates import (
    ANSWER_PROMPT,
    ANSWER_SYSTEM,
    NO_CONTEXT,
    OBSERVE_PROMPT,
    OBSERVE_SYSTEM,
    THINK_PROMPT,
    THINK_SYSTEM,
    format_thought_history,
)
from agentic_rag.models.domain import (
    ChatMessage,
    NextStep,
    Observation,
    Thought,
    ThoughtAction,
)
from agentic_rag.models.schemas import ObservationResponse, ThoughtResponse
from agentic_rag.observability.logger import get_logger
from agentic_rag.protocols.llm import LLMProvider

logger = get_logger("react_loop")

CONVERSATION_TURNS_IN_PROMPT = 6


def extract_field(text: str, field_name: str) -> str | None:
    """Value after ``FIELD:`` up to the end of that line, or None when absent."""
    marker = f"{field_name}:"
    start = text.find(marker)
    if start == -1:
        return None
    start += len(marker)
    end = text.find("\n", start)
    if end == -1:
        end = len(text)
    return text[start:end].strip()


def parse_action(raw: str | None) -> ThoughtAction:
    if not raw:
        return ThoughtAction.ANSWER
    value = raw.strip().strip("[]").upper()
    for action in ThoughtAction:
        if value.startswith(action.value):
            return action
    return ThoughtAction.ANSWER


def parse_next_step(raw: str | None) -> NextStep:
    if not raw:
        return NextStep.ANSWER
    value = raw.strip().strip("[]").upper()
    for step in NextStep:
        if value.startswith(step.value):
            return step
    return NextStep.ANSWER


def parse_success(raw: str | bool | None) -> bool:
    if isinstance(raw, bool):
        return raw
    if not raw:
        return False
    value = raw.strip().upper()
    return value.startswith(("YES", "OUI", "TRUE"))


def format_conversation(history: list[ChatMessage] | None) -> str:
    if not history:
        return ""
    recent = history[-CONVERSATION_TURNS_IN_PROMPT:]
    lines = [f"{m.role}: {m.content}" for m in recent]
    return "\n\nPREVIOUS CONVERSATION:\n" + "\n".join(lines)


class ReasoningLoop:
    def __init__(self, llm: LLMProvider, settings: Settings) -> None:
        self._llm = llm
        self._settings = settings

    async def react(
        self,
        question: str,
        context: str,
        history: list[ChatMessage] | None = None,
        max_iterations: int | None = None,
    ) -> str:
        max_iterations = max(1, max_iterations or self._settings.react_max_iterations)
        thought_history: list[str] = []
        current_context = context

        for iteration in range(1, max_iterations + 1):
            thought = await self.think(question, current_context, thought_history)
            thought_history.append(f"Step {iteration}: {thought.reasoning}")
            logger.info(
                "react_iteration",
                iteration=iteration,
                action=thought.action.value,
                step=thought.step,
            )

            if thought.action is ThoughtAction.ANSWER:
                return await self.generate_answer(
                    question, current_context, thought_history, history
                )
            if thought.action is ThoughtAction.CLARIFY:
                logger.info("react_clarify", iteration=iteration)
                return CLARIFICATION_PREFIX + thought.reasoning

            observation = await self.observe(current_context, thought)
            logger.info(
                "react_observation",
                iteration=iteration,
                success=observation.success,
                next_step=observation.next_step.value,
            )
            if (
                observation.success
                and observation.next_step is NextStep.CONTINUE
                and observation.result
            ):
                current_context = observation.result
            elif observation.next_step is NextStep.ANSWER:
                return await self.generate_answer(
                    question, current_context, thought_history, history
                )

        logger.warning("react_max_iterations_reached", max_iterations=max_iterations)
        return await self.generate_answer(question, current_context, thought_history, history)

    async def think(self, question: str, context: str, thought_history: list[str]) -> Thought:
        prompt = THINK_PROMPT.format(
            question=question,
            context=context[: self._settings.think_context_chars] if context else NO_CONTEXT,
            history=format_thought_history(thought_history),
        )
        timeout = self._settings.llm_timeout_seconds

        structured = await call_structured(
            self._llm, prompt, ThoughtResponse, system=THINK_SYSTEM, timeout=timeout, stage="think"
        )
        if structured.ok:
            r = structured.value
            return Thought(reasoning=r.reasoning, action=parse_action(r.action), step=r.step)

        text = structured
        if not structured.timed_out:
            text = await call_text(
                self._llm, prompt, system=THINK_SYSTEM, timeout=timeout, stage="think"
            )
        if not text.ok:
            logger.warning("think_failed", error=text.error)
            return Thought(
                reasoning="Reasoning unavailable",
                action=ThoughtAction.ANSWER,
                step="Proceed to the answer",
            )
        return Thought(
            reasoning=extract_field(text.value, "REASONING") or "",
            action=parse_action(extract_field(text.value, "ACTION")),
            step=extract_field(text.value, "STEP") or "",
        )

    async def observe(self, context: str, thought: Thought) -> Observation:
        prompt = OBSERVE_PROMPT.format(
            action=thought.action.value,
            context=context[: self._settings.observe_context_chars] if context else NO_CONTEXT,
        )
        timeout = self._settings.llm_timeout_seconds

        structured = await call_structured(
            self._llm,
            prompt,
            ObservationResponse,
            system=OBSERVE_SYSTEM,
            timeout=timeout,
            stage="observe",
        )
        if structured.ok:
            r = structured.value
            return Observation(
                result=r.result,
                success=parse_success(r.success),
                next_step=parse_next_step(r.next_step),
            )

        text = structured
        if not structured.timed_out:
            text = await call_text(
                self._llm, prompt, system=OBSERVE_SYSTEM, timeout=timeout, stage="observe"
            )
        if not text.ok:
            logger.warning("observe_failed", error=text.error)
            return Observation(result="", success=False, next_step=NextStep.ANSWER)
        return Observation(
            result=extract_field(text.value, "RESULT") or "",
            success=parse_success(extract_field(text.value, "SUCCESS")),
            next_step=parse_next_step(extract_field(text.value, "NEXT_STEP")),
        )

    async def generate_answer(
        self,
        question: str,
        context: str,
        thought_history: list[str],
        history: list[ChatMessage] | None = None,
    ) -> str:
        reasoning = (
            "\n\nREASONING HISTORY:\n" + "\n".join(thought_history) if thought_history else ""
        )
        prompt = ANSWER_PROMPT.format(
            question=question,
            context=context or NO_CONTEXT,
            conversation=format_conversation(history),
            history=reasoning,
        )
        result = await call_text(
            self._llm,
            prompt,
            system=ANSWER_SYSTEM.format(language=self._settings.response_language),
            timeout=self._settings.llm_timeout_seconds,
            stage="answer",
        )
        if not result.ok or not result.value.strip():
            logger.error("answer_generation_failed", error=result.error)
            return ANSWER_FAILED_MESSAGE
        return result.value.strip()
