"""Fixed lexical tables and user-facing messages."""

from __future__ import annotations

# Routing keywords (matched as lowercase substrings, French and English)
DOCUMENT_KEYWORDS: tuple[str, ...] = (
    "document", "pdf", "fichier", "file",
    "analyse", "analysis", "analyser", "analyze",
    "données", "data", "dataset",
    "conclusion", "conclusions",
    "méthode", "method", "méthodes", "methods",
    "résultat", "result", "résultats", "results",
    "cours", "course", "formation", "training",
    "contenu", "content", "contenus",
    "résume", "summarize", "summary", "résumé", "résumés",
    "décris", "describe", "description",
    "explique", "explain", "explication",
    "qu'est-ce que", "what is", "what are",
    "définition", "definition",
    "image", "images", "photo", "photos",
    "rapport", "report", "rapports", "reports",
)

TRANSACTION_KEYWORDS: tuple[str, ...] = (
    "transaction", "transactions",
    "compte", "account", "comptes", "accounts",
    "solde", "balance", "soldes", "balances",
    "montant", "amount", "montants", "amounts",
    "débit", "debit", "crédit", "credit",
    "statut", "status", "statuts", "statuses",
    "pending", "executed", "canceled", "cancelled",
    "en attente", "exécuté", "annulé", "annulée",
    "créer", "create", "ajouter", "add",
    "supprimer", "delete", "remove",
    "mettre à jour", "update", "modifier", "modify",
    "liste", "list", "afficher", "show", "display",
)

# Retrieval keyword fallback
KEYWORD_MIN_LENGTH = 3
RETRIEVAL_STOPWORDS: frozenset[str] = frozenset(
    {
        "dans", "pour", "avec", "sont", "quel", "quels", "quelle", "quelles",
        "what", "which", "where", "when", "does", "with", "from", "that",
        "this", "about", "there", "their", "have", "into", "your",
    }
)

GENERIC_TERMS: tuple[str, ...] = (
    "document", "content", "text", "information", "data", "analysis",
    "summary", "introduction", "method", "technique", "statistics",
    "machine learning",
)
DATA_CUES: tuple[str, ...] = ("analysis", "analyse", "data", "données")
DATA_GENERIC_TERMS: tuple[str, ...] = (
    "data analysis", "analysis", "data", "statistics", "method",
    "technique", "course", "summary", "introduction",
)
COURSE_CUES: tuple[str, ...] = ("course", "cours", "summary", "résumé")
COURSE_GENERIC_TERMS: tuple[str, ...] = (
    "course", "summary", "introduction", "document", "content", "text",
    "information", "analysis",
)

# User-facing messages
DOCUMENTS_UNAVAILABLE_MESSAGE = (
    "Je suis désolé, mais cette information n'est pas disponible dans les "
    "documents fournis. Veuillez vous assurer que les documents sont chargés "
    "dans le système."
)
PIPELINE_ERROR_MESSAGE = (
    "Erreur lors du traitement de votre question. Veuillez réessayer."
)
ANSWER_FAILED_MESSAGE = "Je n'ai pas pu générer de réponse. Veuillez réessayer."
CLARIFICATION_PREFIX = "Pourriez-vous préciser votre question ? "

# Neutral defaults for structuring
DEFAULT_INTENT = "Answer the user's question"
DEFAULT_RESPONSE_TEMPLATE = "Respond clearly and thoroughly"
UNKNOWN_INTENT = "unknown"
ERROR_INTENT = "error"
DOCUMENTS_UNAVAILABLE_INTENT = "documents_unavailable"

# Verification issue labels
ISSUE_LOW_COHERENCE = "low coherence"
ISSUE_POSSIBLE_HALLUCINATION = "possible hallucination"
ISSUE_LOW_RELEVANCE = "low relevance"

NEUTRAL_SCORE = 0.5
NO_CONTEXT_HALLUCINATION_SCORE = 0.3
