"""Tests for the end-to-end orchestration."""

import asyncio

import pytest

from agentic_rag.config.constants import (
    DOCUMENTS_UNAVAILABLE_MESSAGE,
    ERROR_INTENT,
    PIPELINE_ERROR_MESSAGE,
)
from agentic_rag.exceptions import ToolExecutionError
from agentic_rag.models.domain import ChatMessage, Route
from agentic_rag.routing.classifier import QuestionClassifier

from fakes import (
    FakeTransactionStore,
    ScriptedLLM,
    build_orchestrator as build,
    make_transaction,
    passages,
)


def answer_prompts(llm):
    return [p for s, p in llm.calls if "expert assistant" in s]


async def test_balance_question_goes_through_tools(settings, answer_rules):
    llm = ScriptedLLM(answer_rules)
    store = FakeTransactionStore([make_transaction(1, 42, 150.0)])
    orchestrator, similarity = build(settings, llm, store)

    result = await orchestrator.orchestrate("What is the balance of account 42?")

    assert result.route is Route.TRANSACTION
    assert result.final_answer == "Generated answer."
    assert result.confidence == pytest.approx(0.9)
    assert result.was_corrected is False
    assert result.intent == "Get information"
    assert result.trace_id
    assert "Le solde du compte 42 est de 150.00" in answer_prompts(llm)[0]
    assert similarity.calls == []


async def test_document_question_uses_retrieval_only(settings, answer_rules):
    llm = ScriptedLLM(answer_rules)
    store = FakeTransactionStore(fail_with=ToolExecutionError("must not be called"))
    orchestrator, _ = build(
        settings,
        llm,
        store,
        handler=lambda e, k, s: passages(("Conclusion: X improves Y by 10%.", 0.87)),
    )

    result = await orchestrator.orchestrate("Summarize the uploaded PDF's conclusions")

    assert result.route is Route.DOCUMENT
    prompt = answer_prompts(llm)[0]
    assert "Conclusion: X improves Y by 10%." in prompt
    assert "Do not mention the database" in prompt
    assert "TRANSACTION DATABASE DATA:" not in prompt
    assert "transaction" not in result.final_answer.lower()


async def test_retrieval_miss_returns_not_available(settings, answer_rules):
    llm = ScriptedLLM(answer_rules)
    orchestrator, _ = build(settings, llm)

    result = await orchestrator.orchestrate("Summarize the uploaded PDF's conclusions")

    assert result.final_answer == DOCUMENTS_UNAVAILABLE_MESSAGE
    assert result.confidence == 0.0
    assert result.was_corrected is False
    assert llm.calls == []


async def test_correction_is_applied(settings, answer_rules):
    llm = ScriptedLLM({**answer_rules, "hallucination detection": "0.3"})
    orchestrator, _ = build(settings, llm, FakeTransactionStore([make_transaction(1, 42, 150.0)]))

    result = await orchestrator.orchestrate("Quel est le solde du compte 42 ?")

    assert result.final_answer == "Corrected answer."
    assert result.was_corrected is True
    assert result.confidence == pytest.approx(0.66)
    assert result.issues == ["possible hallucination"]


async def test_failed_correction_keeps_original_answer(settings, answer_rules):
    rules = {k: v for k, v in answer_rules.items() if k != "response correction"}
    rules["coherence analysis"] = "0.1"
    llm = ScriptedLLM(rules)
    orchestrator, _ = build(settings, llm)

    result = await orchestrator.orchestrate("Quel est le solde du compte 42 ?")

    assert result.final_answer == "Generated answer."
    assert result.was_corrected is False
    assert "low coherence" in result.issues


async def test_no_applicable_tool_still_answers(settings, answer_rules):
    llm = ScriptedLLM(answer_rules)
    orchestrator, _ = build(settings, llm)

    result = await orchestrator.orchestrate("Bonjour")

    assert result.route is Route.TRANSACTION
    assert result.final_answer == "Generated answer."


async def test_history_reaches_generation(settings, answer_rules):
    llm = ScriptedLLM(answer_rules)
    orchestrator, _ = build(settings, llm)
    history = [ChatMessage(role="user", content="earlier question")]

    await orchestrator.orchestrate("Bonjour", history=history)

    assert "user: earlier question" in answer_prompts(llm)[0]


class ExplodingClassifier(QuestionClassifier):
    def __init__(self, error):
        super().__init__()
        self.error = error

    def classify(self, question):
        raise self.error


async def test_unexpected_failure_becomes_error_result(settings, answer_rules):
    orchestrator, _ = build(
        settings, ScriptedLLM(answer_rules), classifier=ExplodingClassifier(KeyError("boom"))
    )

    result = await orchestrator.orchestrate("anything")

    assert result.final_answer == PIPELINE_ERROR_MESSAGE
    assert result.confidence == 0.0
    assert result.was_corrected is False
    assert result.intent == ERROR_INTENT


async def test_cancellation_is_not_swallowed(settings, answer_rules):
    orchestrator, _ = build(
        settings,
        ScriptedLLM(answer_rules),
        classifier=ExplodingClassifier(asyncio.CancelledError()),
    )
    with pytest.raises(asyncio.CancelledError):
        await orchestrator.orchestrate("anything")
