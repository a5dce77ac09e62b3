"""Central configuration via Pydantic Settings. All values driven by env vars."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # API Keys
    openai_api_key: str = ""
    google_api_key: str = ""

    # LLM / Gemini
    gemini_model: str = "gemini-2.0-flash"
    gemini_temperature: float = 0.1
    gemini_max_tokens: int = 4096
    response_language: str = "French"

    # Embedding
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = 1536

    # Per-call timeouts (a timeout counts as a failed call)
    llm_timeout_seconds: float = 60.0
    embedding_timeout_seconds: float = 15.0
    search_timeout_seconds: float = 10.0

    # Retrieval ladder
    retriever_max_results: int = 30
    retriever_score_thresholds: list[float] = [0.0, 0.1, 0.2, 0.3, 0.5]
    retriever_widened_max_results: int = 100
    retriever_keyword_max_results: int = 20
    retriever_generic_max_results: int = 50
    retriever_fallback_max_results: int = 1000
    retriever_fallback_min_score: float = -10.0
    passage_max_chars: int = 5000

    # Think-Act-Observe loop
    react_max_iterations: int = 3
    think_context_chars: int = 1500
    observe_context_chars: int = 1000

    # Verification weights and thresholds
    verify_w_coherence: float = 0.4
    verify_w_hallucination: float = 0.4
    verify_w_relevance: float = 0.2
    coherence_issue_threshold: float = 0.6
    hallucination_issue_threshold: float = 0.7
    relevance_issue_threshold: float = 0.6
    confidence_threshold: float = 0.7
    verify_context_chars: int = 2000
    verify_answer_chars: int = 1000

    # Conversation memory
    memory_max_messages: int = 20
    memory_max_chats: int = 1000

    # Storage paths
    faiss_index_path: str = "data/faiss_index"
    transactions_db_path: str = "data/transactions.db"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    json_logs: bool = False

    model_config = {"env_file": ".env", "env_prefix": "AGENTIC_"}
