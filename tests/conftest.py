"""Shared test fixtures."""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from agentic_rag.config.settings import Settings
from agentic_rag.models.domain import TransactionStatus, TransactionType

from fakes import FakeTransactionStore, make_transaction


@pytest.fixture
def settings():
    """Test settings with temp paths and short timeouts."""
    tmp = tempfile.mkdtemp()
    return Settings(
        openai_api_key="test-key",
        google_api_key="test-key",
        faiss_index_path=str(Path(tmp) / "faiss_index"),
        transactions_db_path=str(Path(tmp) / "transactions.db"),
        llm_timeout_seconds=1.0,
        embedding_timeout_seconds=1.0,
        search_timeout_seconds=1.0,
    )


@pytest.fixture
def sample_transactions():
    return [
        make_transaction(1, 42, 200.0, TransactionType.CREDIT, TransactionStatus.EXECUTED),
        make_transaction(2, 42, 50.0, TransactionType.DEBIT, TransactionStatus.EXECUTED),
        make_transaction(3, 7, 1200.0, TransactionType.CREDIT, TransactionStatus.PENDING),
        make_transaction(4, 7, 300.0, TransactionType.DEBIT, TransactionStatus.CANCELED),
    ]


@pytest.fixture
def transaction_store(sample_transactions):
    return FakeTransactionStore(sample_transactions)


@pytest.fixture
def answer_rules():
    """A well-behaved model: answers immediately and scores everything 0.9."""
    return {
        "reasoning agent": "REASONING: The context answers the question.\nACTION: ANSWER\nSTEP: answer",
        "expert assistant": "Generated answer.",
        "intent analysis": "Get information",
        "information extraction": "- point one\n- point two",
        "response structuring": "Short paragraph",
        "coherence analysis": "0.9",
        "hallucination detection": "0.9",
        "relevance analysis": "0.9",
        "response correction": "Corrected answer.",
    }
