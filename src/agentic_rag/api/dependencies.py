"""FastAPI dependency injection helpers."""

from __future__ import annotations

from fastapi import Request

from agentic_rag.memory.conversation import ConversationMemoryStore
from agentic_rag.pipeline.orchestrator import Orchestrator
from agentic_rag.protocols.transaction_store import TransactionStore
from agentic_rag.retrieval.vector_retriever import VectorRetriever
from agentic_rag.vectorstore.faiss_store import FAISSVectorStore


def get_orchestrator(request: Request) -> Orchestrator:
    return request.app.state.orchestrator


def get_memory_store(request: Request) -> ConversationMemoryStore:
    return request.app.state.memory_store


def get_transaction_store(request: Request) -> TransactionStore:
    return request.app.state.transaction_store


def get_retriever(request: Request) -> VectorRetriever:
    return request.app.state.retriever


def get_vector_store(request: Request) -> FAISSVectorStore | None:
    return request.app.state.vector_store
