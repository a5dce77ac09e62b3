"""Pydantic models for API serialization and structured LLM responses."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class AskRequest(BaseModel):
    question: str
    chat_id: str = "default"


class AskResponse(BaseModel):
    answer: str
    confidence: float = Field(ge=0.0, le=1.0)
    was_corrected: bool
    intent: str
    route: Literal["DOCUMENT", "TRANSACTION"] | None = None
    issues: list[str] = Field(default_factory=list)
    trace_id: str | None = None


class TransactionSchema(BaseModel):
    id: int | None
    date: datetime
    account_id: int
    amount: float
    type: Literal["DEBIT", "CREDIT"]
    status: Literal["PENDING", "EXECUTED", "CANCELED"]


class HealthResponse(BaseModel):
    status: str
    embedder_available: bool
    vector_store_available: bool
    index_size: int
    transaction_count: int


# Structured responses requested from the generation service


class ThoughtResponse(BaseModel):
    reasoning: str = ""
    action: str = "ANSWER"
    step: str = ""


class ObservationResponse(BaseModel):
    result: str = ""
    success: bool = False
    next_step: str = "ANSWER"


class ScoreResponse(BaseModel):
    score: float
