"""Tests for the bounded generation helpers."""

from pydantic import BaseModel

from agentic_rag.exceptions import GenerationError
from agentic_rag.generation.llm_calls import call_structured, call_text

from fakes import ScriptedLLM


class Answer(BaseModel):
    value: int


async def test_call_text_success():
    result = await call_text(ScriptedLLM({"": "hello"}), "prompt", system="any")
    assert result.ok
    assert result.value == "hello"


async def test_call_text_failure_is_a_value():
    result = await call_text(ScriptedLLM({"": GenerationError("quota")}), "prompt")
    assert not result.ok
    assert result.value is None
    assert "quota" in result.error


async def test_call_text_timeout_is_a_failure():
    llm = ScriptedLLM({"": "late"}, delay=0.5)
    result = await call_text(llm, "prompt", timeout=0.01, stage="think")
    assert not result.ok
    assert "timed out" in result.error
    assert result.timed_out


async def test_call_structured_success():
    llm = ScriptedLLM(structured={"": {"value": 3}})
    result = await call_structured(llm, "prompt", Answer)
    assert result.ok
    assert result.value == Answer(value=3)


async def test_call_structured_wrong_type_is_a_failure():
    llm = ScriptedLLM(structured={"": "not a model"})
    result = await call_structured(llm, "prompt", Answer)
    assert not result.ok


async def test_call_structured_unsupported_is_a_failure():
    result = await call_structured(ScriptedLLM(), "prompt", Answer)
    assert not result.ok
    assert not result.timed_out


async def test_call_structured_timeout_is_flagged():
    llm = ScriptedLLM(structured={"": {"value": 3}}, delay=0.5)
    result = await call_structured(llm, "prompt", Answer, timeout=0.01)
    assert not result.ok
    assert result.timed_out
