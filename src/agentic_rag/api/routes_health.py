"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from agentic_rag.api.dependencies import (
    get_retriever,
    get_transaction_store,
    get_vector_store,
)
from agentic_rag.models.schemas import HealthResponse
from agentic_rag.observability.logger import get_logger
from agentic_rag.protocols.transaction_store import TransactionStore
from agentic_rag.retrieval.vector_retriever import VectorRetriever
from agentic_rag.vectorstore.faiss_store import FAISSVectorStore

logger = get_logger("health")

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(
    retriever: VectorRetriever = Depends(get_retriever),
    vector_store: FAISSVectorStore | None = Depends(get_vector_store),
    transaction_store: TransactionStore = Depends(get_transaction_store),
) -> HealthResponse:
    status = "ok"
    try:
        transaction_count = await transaction_store.count()
    except Exception as e:
        logger.warning("transaction_store_unavailable", error=str(e))
        transaction_count = 0
        status = "degraded"

    if not retriever.available:
        status = "degraded"

    return HealthResponse(
        status=status,
        embedder_available=retriever.embedder_available,
        vector_store_available=vector_store is not None,
        index_size=vector_store.size if vector_store is not None else 0,
        transaction_count=transaction_count,
    )
