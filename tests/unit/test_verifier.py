"""Tests for answer verification and correction."""

import pytest

from agentic_rag.exceptions import GenerationError
from agentic_rag.verification.verifier import Verifier, parse_score

from fakes import ScriptedLLM


def scores(coherence, hallucination, relevance, correction="Corrected answer."):
    return {
        "coherence analysis": coherence,
        "hallucination detection": hallucination,
        "relevance analysis": relevance,
        "response correction": correction,
    }


async def test_high_scores_need_no_correction(settings):
    llm = ScriptedLLM(scores("0.9", "0.9", "0.9"))
    result = await Verifier(llm, settings).verify("q", "answer", "context")
    assert result.confidence == pytest.approx(0.9)
    assert result.needs_correction is False
    assert result.issues == []
    assert result.corrected_answer is None
    assert llm.calls_for("response correction") == 0


async def test_low_hallucination_score_triggers_correction(settings):
    llm = ScriptedLLM(scores("0.9", "0.3", "0.9"))
    result = await Verifier(llm, settings).verify("q", "answer", "context")
    assert result.confidence == pytest.approx(0.66)
    assert result.needs_correction is True
    assert result.issues == ["possible hallucination"]
    assert result.corrected_answer == "Corrected answer."
    correction_prompt = [p for s, p in llm.calls if "response correction" in s][0]
    assert "possible hallucination" in correction_prompt
    assert "answer" in correction_prompt


async def test_issue_alone_triggers_correction(settings):
    # 0.4*1 + 0.4*1 + 0.2*0.5 = 0.9, above threshold, but relevance is flagged
    llm = ScriptedLLM(scores("1.0", "1.0", "0.5"))
    result = await Verifier(llm, settings).verify("q", "answer", "context")
    assert result.confidence == pytest.approx(0.9)
    assert result.issues == ["low relevance"]
    assert result.needs_correction is True


async def test_failed_axes_default_to_neutral(settings):
    llm = ScriptedLLM({"response correction": GenerationError("down")})
    result = await Verifier(llm, settings).verify("q", "answer", "context")
    assert result.coherence == result.non_hallucination == result.relevance == 0.5
    assert result.confidence == pytest.approx(0.5)
    assert result.issues == ["low coherence", "possible hallucination", "low relevance"]
    assert result.needs_correction is True
    assert result.corrected_answer is None


async def test_missing_context_uses_axis_defaults(settings):
    llm = ScriptedLLM(scores("0.9", "0.9", "0.9"))
    result = await Verifier(llm, settings).verify("q", "answer", "")
    assert result.coherence == 0.5
    assert result.non_hallucination == 0.3
    assert result.relevance == pytest.approx(0.9)
    assert result.confidence == pytest.approx(0.5)
    assert llm.calls_for("coherence analysis") == 0
    assert llm.calls_for("hallucination detection") == 0


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1.7", 1.0),
        ("-0.4", 0.0),
        ("Score: 0.85", 0.85),
        ("excellent", 0.5),
        ("", 0.5),
    ],
)
async def test_scores_are_parsed_and_clamped(settings, raw, expected):
    llm = ScriptedLLM(scores(raw, raw, raw))
    result = await Verifier(llm, settings).verify("q", "answer", "context")
    assert result.coherence == pytest.approx(expected)
    assert 0.0 <= result.confidence <= 1.0


async def test_structured_scores_are_preferred(settings):
    llm = ScriptedLLM(
        structured={
            "coherence analysis": {"score": 0.8},
            "hallucination detection": {"score": 2.0},
            "relevance analysis": {"score": 0.7},
        }
    )
    result = await Verifier(llm, settings).verify("q", "answer", "context")
    assert result.coherence == pytest.approx(0.8)
    assert result.non_hallucination == 1.0
    assert result.confidence == pytest.approx(0.4 * 0.8 + 0.4 * 1.0 + 0.2 * 0.7)
    assert llm.calls == []


async def test_non_finite_structured_score_is_neutral(settings):
    llm = ScriptedLLM(
        scores("0.9", "0.9", "0.9"),
        structured={
            "coherence analysis": {"score": float("nan")},
            "hallucination detection": {"score": float("inf")},
            "relevance analysis": {"score": 0.9},
        },
    )
    result = await Verifier(llm, settings).verify("q", "answer", "context")
    assert result.coherence == 0.5
    assert result.non_hallucination == 0.5
    assert result.needs_correction is True


async def test_structured_timeout_skips_text_scoring(settings):
    settings = settings.model_copy(update={"llm_timeout_seconds": 0.05})
    llm = ScriptedLLM(
        scores("0.9", "0.9", "0.9"),
        structured={"": {"score": 0.9}},
        delay=0.5,
    )
    result = await Verifier(llm, settings).verify("q", "answer", "context")
    assert (result.coherence, result.non_hallucination, result.relevance) == (0.5, 0.5, 0.5)
    assert llm.calls_for("coherence analysis") == 0
    assert llm.calls_for("hallucination detection") == 0
    assert llm.calls_for("relevance analysis") == 0


async def test_prompts_truncate_context_and_answer(settings):
    llm = ScriptedLLM(scores("0.9", "0.9", "0.9"))
    await Verifier(llm, settings).verify("q", "a" * 1500, "c" * 2500)
    coherence_prompt = [p for s, p in llm.calls if "coherence analysis" in s][0]
    assert "c" * 2000 in coherence_prompt and "c" * 2001 not in coherence_prompt
    assert "a" * 1000 in coherence_prompt and "a" * 1001 not in coherence_prompt


async def test_verification_is_deterministic(settings):
    verifier = Verifier(ScriptedLLM(scores("0.7", "0.6", "0.8", "fixed")), settings)
    first = await verifier.verify("q", "answer", "context")
    second = await verifier.verify("q", "answer", "context")
    assert first == second


def test_parse_score():
    assert parse_score("0.75") == 0.75
    assert parse_score("The score is 1") == 1.0
    assert parse_score("none") is None
    assert parse_score(None) is None
    assert parse_score("1" * 400) is None
