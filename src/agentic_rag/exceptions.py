"""Custom exception hierarchy for the agentic RAG service."""


class AgenticRAGError(Exception):
    """Base exception for all service errors."""


class GenerationError(AgenticRAGError):
    """Error calling the text generation service."""


class EmbeddingError(AgenticRAGError):
    """Error generating embeddings."""


class RetrievalError(AgenticRAGError):
    """Error during similarity search."""


class ToolExecutionError(AgenticRAGError):
    """Error executing a transaction tool."""


class TransactionNotFoundError(ToolExecutionError):
    """No transaction exists with the requested id."""

    def __init__(self, transaction_id: int) -> None:
        super().__init__(f"Transaction non trouvée avec l'ID: {transaction_id}")
        self.transaction_id = transaction_id


class ConfigurationError(AgenticRAGError):
    """Error in system configuration."""
