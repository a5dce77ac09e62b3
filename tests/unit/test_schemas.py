"""Tests for Pydantic schemas."""

import pytest
from pydantic import ValidationError

from agentic_rag.models.schemas import (
    AskRequest,
    AskResponse,
    HealthResponse,
    ObservationResponse,
    ScoreResponse,
    ThoughtResponse,
    TransactionSchema,
)


def test_ask_request_defaults():
    req = AskRequest(question="Quel est le solde du compte 42 ?")
    assert req.chat_id == "default"


def test_ask_response_serialization():
    resp = AskResponse(
        answer="Le solde est de 150.00",
        confidence=0.85,
        was_corrected=False,
        intent="Get information",
        route="TRANSACTION",
        trace_id="abc123",
    )
    data = resp.model_dump()
    assert data["confidence"] == 0.85
    assert data["route"] == "TRANSACTION"
    assert data["issues"] == []


def test_ask_response_confidence_bounds():
    with pytest.raises(ValidationError):
        AskResponse(answer="x", confidence=1.5, was_corrected=False, intent="i")
    with pytest.raises(ValidationError):
        AskResponse(answer="x", confidence=-0.1, was_corrected=False, intent="i")


def test_ask_response_rejects_unknown_route():
    with pytest.raises(ValidationError):
        AskResponse(answer="x", confidence=0.5, was_corrected=False, intent="i", route="WEB")


def test_transaction_schema_rejects_unknown_status():
    with pytest.raises(ValidationError):
        TransactionSchema(
            id=1,
            date="2024-01-15T10:30:00+00:00",
            account_id=42,
            amount=10.0,
            type="CREDIT",
            status="REFUNDED",
        )


def test_health_response():
    resp = HealthResponse(
        status="ok",
        embedder_available=True,
        vector_store_available=True,
        index_size=6,
        transaction_count=4,
    )
    assert resp.status == "ok"


def test_structured_response_defaults():
    assert ThoughtResponse().action == "ANSWER"
    observation = ObservationResponse()
    assert observation.success is False
    assert observation.next_step == "ANSWER"
    assert ScoreResponse(score=0.7).score == 0.7
