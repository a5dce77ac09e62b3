"""Core domain objects used throughout the system."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class Route(str, Enum):
    DOCUMENT = "DOCUMENT"
    TRANSACTION = "TRANSACTION"


class ThoughtAction(str, Enum):
    ANSWER = "ANSWER"
    SEARCH_MORE = "SEARCH_MORE"
    CLARIFY = "CLARIFY"


class NextStep(str, Enum):
    ANSWER = "ANSWER"
    CONTINUE = "CONTINUE"
    SEARCH_MORE = "SEARCH_MORE"


class TransactionType(str, Enum):
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class TransactionStatus(str, Enum):
    PENDING = "PENDING"
    EXECUTED = "EXECUTED"
    CANCELED = "CANCELED"


@dataclass
class StageResult(Generic[T]):
    """Outcome of a fallible stage call: a value or an error description."""

    value: T | None = None
    error: str | None = None
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> StageResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: str, timed_out: bool = False) -> StageResult[T]:
        return cls(error=error, timed_out=timed_out)


@dataclass
class RetrievedPassage:
    text: str
    score: float
    rank: int = 0


@dataclass(frozen=True)
class StructuredContext:
    intent: str
    body: str
    key_points: str
    response_template: str


@dataclass
class Thought:
    reasoning: str
    action: ThoughtAction
    step: str


@dataclass
class Observation:
    result: str
    success: bool
    next_step: NextStep


@dataclass
class VerificationResult:
    confidence: float
    needs_correction: bool
    issues: list[str]
    corrected_answer: str | None = None
    coherence: float | None = None
    non_hallucination: float | None = None
    relevance: float | None = None


@dataclass
class OrchestrationResult:
    final_answer: str
    confidence: float
    was_corrected: bool
    intent: str
    route: Route | None = None
    issues: list[str] = field(default_factory=list)
    trace_id: str | None = None


@dataclass
class Transaction:
    id: int | None
    account_id: int
    amount: float
    type: TransactionType
    status: TransactionStatus
    date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class ChatMessage:
    role: str  # "user" or "assistant"
    content: str
