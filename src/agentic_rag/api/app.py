"""FastAPI application factory with lifespan management."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from agentic_rag.api.middleware import RequestContextMiddleware
from agentic_rag.api.routes_ask import router as ask_router
from agentic_rag.api.routes_health import router as health_router
from agentic_rag.api.routes_transactions import router as transactions_router
from agentic_rag.config.settings import Settings
from agentic_rag.embeddings.openai_embedder import OpenAIEmbedder
from agentic_rag.exceptions import ConfigurationError
from agentic_rag.generation.gemini_provider import GeminiProvider
from agentic_rag.memory.conversation import ConversationMemoryStore
from agentic_rag.observability.logger import get_logger, setup_logging
from agentic_rag.pipeline.orchestrator import Orchestrator
from agentic_rag.reasoning.context_structurer import ContextStructurer
from agentic_rag.reasoning.react_loop import ReasoningLoop
from agentic_rag.retrieval.vector_retriever import VectorRetriever
from agentic_rag.routing.classifier import QuestionClassifier
from agentic_rag.storage.sqlite_transaction_store import SQLiteTransactionStore
from agentic_rag.tools.tool_invoker import ToolInvoker
from agentic_rag.vectorstore.faiss_store import FAISSVectorStore
from agentic_rag.verification.verifier import Verifier

logger = get_logger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()
    setup_logging(settings.log_level, settings.json_logs)

    if not settings.google_api_key:
        raise ConfigurationError("AGENTIC_GOOGLE_API_KEY is required for answer generation")

    # Ensure data directories exist
    Path(settings.transactions_db_path).parent.mkdir(parents=True, exist_ok=True)
    Path(settings.faiss_index_path).mkdir(parents=True, exist_ok=True)

    # Storage
    transaction_store = SQLiteTransactionStore(settings.transactions_db_path)
    await transaction_store.initialize()

    # Embedding and vector index; retrieval degrades to "no results" without them
    embedder = None
    if settings.openai_api_key:
        embedder = OpenAIEmbedder(
            api_key=settings.openai_api_key,
            model=settings.embedding_model,
            _dimensions=settings.embedding_dimensions,
        )
    else:
        logger.warning("embedder_disabled", reason="AGENTIC_OPENAI_API_KEY not set")

    vector_store = None
    try:
        vector_store = FAISSVectorStore(
            dimensions=settings.embedding_dimensions,
            index_path=settings.faiss_index_path,
        )
    except Exception as e:
        logger.error("vector_store_unavailable", error=str(e))

    # LLM
    llm = GeminiProvider(
        api_key=settings.google_api_key,
        model=settings.gemini_model,
        temperature=settings.gemini_temperature,
        max_tokens=settings.gemini_max_tokens,
    )

    # Pipeline stages
    retriever = VectorRetriever(embedder=embedder, store=vector_store, settings=settings)
    orchestrator = Orchestrator(
        classifier=QuestionClassifier(),
        retriever=retriever,
        tool_invoker=ToolInvoker(transaction_store),
        structurer=ContextStructurer(llm, settings),
        reasoning_loop=ReasoningLoop(llm, settings),
        verifier=Verifier(llm, settings),
        settings=settings,
    )

    # Attach to app state
    app.state.orchestrator = orchestrator
    app.state.retriever = retriever
    app.state.vector_store = vector_store
    app.state.transaction_store = transaction_store
    app.state.memory_store = ConversationMemoryStore(
        settings.memory_max_messages, settings.memory_max_chats
    )
    app.state.settings = settings

    logger.info(
        "startup_complete",
        transactions=await transaction_store.count(),
        index_size=vector_store.size if vector_store is not None else 0,
        embedder=embedder is not None,
    )

    yield

    # Shutdown: persist the index
    if vector_store is not None:
        vector_store.save()
    logger.info("shutdown_complete")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Agentic RAG Router",
        version="1.0.0",
        description="Routes questions to documents or transactions and verifies the answer",
        lifespan=lifespan,
    )
    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(ask_router, tags=["ask"])
    app.include_router(transactions_router, tags=["transactions"])
    return app
