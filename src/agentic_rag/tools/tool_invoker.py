"""Pattern-matched transaction tools.

Questions are matched against an ordered list of intents. The first pattern
that matches and whose captured groups parse wins; a parse failure falls
through to the next intent. Store failures are rendered as text, never raised.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from agentic_rag.models.domain import Transaction, TransactionStatus, TransactionType
from agentic_rag.observability.logger import get_logger
from agentic_rag.protocols.transaction_store import TransactionStore

logger = get_logger("tool_invoker")

LIST_ALL_PHRASES = (
    "toutes les transactions",
    "all transactions",
    "liste des transactions",
    "list transactions",
    "list all transactions",
    "afficher toutes les transactions",
)

_STATUS = r"(pending|executed|canceled|cancelled)"
_MUTATION_VERBS = (
    r"supprimer|delete|remove|mettre à jour|update|changer|change|"
    r"créer|create|ajouter|add"
)

ACCOUNT_PATTERN = re.compile(
    r"^(?!.*\b(?:solde|balance)\b)(?!.*\b(?:créer|create|ajouter|add)\b)"
    r".*?(?:compte|account)\s*(?:(?:numéro|number|id)\s*)?(?:(?:de|of)\s*)?(\d+)",
    re.IGNORECASE,
)
BALANCE_PATTERN = re.compile(
    r"(?:solde|balance)\s+(?:(?:du|de|of)\s*)?(?:(?:the\s+)?(?:compte|account)\s*)?"
    r"(?:(?:numéro|number|id)\s*)?(?:(?:de|of)\s*)?(\d+)",
    re.IGNORECASE,
)
STATUS_PATTERN = re.compile(
    r"transactions?\s+(?:(?:avec|with|en|in)\s+)?(?:(?:le\s+statut|status)\s+)?" + _STATUS,
    re.IGNORECASE,
)
TRANSACTION_ID_PATTERN = re.compile(
    rf"^(?!.*\b(?:{_MUTATION_VERBS})\b).*?transaction\s+(?:(?:numéro|number|id)\s*)?"
    r"(?:(?:de|of)\s*)?(\d+)",
    re.IGNORECASE,
)
UPDATE_PATTERN = re.compile(
    r"(?:mettre à jour|update|changer|change)\s+(?:le\s+statut|(?:the\s+)?status)\s+"
    r"(?:(?:de|of)\s+)?(?:(?:la\s+|the\s+)?transaction\s*)?(\d+)\s+(?:à|to|en)\s+" + _STATUS,
    re.IGNORECASE,
)
CREATE_PATTERN = re.compile(
    r"(?:créer|create|ajouter|add)\s+(?:(?:une|a)\s+)?(?:(?:nouvelle|new)\s+)?transaction\s+"
    r"(?:(?:pour|for)\s+)?(?:(?:le\s+|the\s+)?(?:compte|account)\s*)?(\d+)\s+"
    r"(?:(?:montant|amount)\s*)?(\d+(?:\.\d+)?)\s+(?:type\s+)?(debit|credit)",
    re.IGNORECASE,
)
DELETE_PATTERN = re.compile(
    r"(?:supprimer|delete|remove)\s+(?:(?:la\s+|the\s+)?transaction\s*)?"
    r"(?:(?:numéro|number|id)\s*)?(?:(?:de|of)\s*)?(\d+)",
    re.IGNORECASE,
)


def parse_status(raw: str) -> TransactionStatus:
    value = raw.upper()
    if value == "CANCELLED":
        value = "CANCELED"
    return TransactionStatus(value)


def format_transaction(t: Transaction) -> str:
    return (
        f"ID: {t.id} | Compte: {t.account_id} | Montant: {t.amount:.2f} | "
        f"Type: {t.type.value} | Statut: {t.status.value} | Date: {t.date.isoformat()}"
    )


def format_transaction_list(header: str, transactions: list[Transaction]) -> str:
    lines = [f"{header} ({len(transactions)}):", ""]
    lines.extend(format_transaction(t) for t in transactions)
    return "\n".join(lines)


@dataclass
class ToolIntent:
    name: str
    matcher: Callable[[str], tuple | None]
    action: Callable[..., Awaitable[str]]


class ToolInvoker:
    def __init__(self, store: TransactionStore) -> None:
        self._store = store
        self._intents = [
            ToolIntent("list_all", self._match_list_all, self._list_all),
            ToolIntent("list_by_account", _regex(ACCOUNT_PATTERN, int), self._list_by_account),
            ToolIntent("balance", _regex(BALANCE_PATTERN, int), self._balance),
            ToolIntent("list_by_status", _regex(STATUS_PATTERN, parse_status), self._list_by_status),
            ToolIntent("get_by_id", _regex(TRANSACTION_ID_PATTERN, int), self._get_by_id),
            ToolIntent(
                "update_status",
                _regex(UPDATE_PATTERN, int, parse_status),
                self._update_status,
            ),
            ToolIntent(
                "create",
                _regex(CREATE_PATTERN, int, float, lambda s: TransactionType(s.upper())),
                self._create,
            ),
            ToolIntent("delete", _regex(DELETE_PATTERN, int), self._delete),
        ]

    async def execute_tools(self, question: str) -> str | None:
        """Run the first applicable tool; None when no intent applies."""
        if not question or not question.strip():
            return None

        for intent in self._intents:
            try:
                args = intent.matcher(question)
            except (ValueError, OverflowError) as e:
                logger.debug("tool_args_unparsable", intent=intent.name, error=str(e))
                continue
            if args is None:
                continue

            logger.info("tool_selected", intent=intent.name, args=[str(a) for a in args])
            try:
                result = await intent.action(*args)
            except Exception as e:
                logger.warning("tool_failed", intent=intent.name, error=str(e))
                return f"Erreur: {e}"
            logger.info("tool_executed", intent=intent.name, result_chars=len(result))
            return result

        logger.info("no_tool_applicable")
        return None

    @staticmethod
    def _match_list_all(question: str) -> tuple | None:
        q = question.lower()
        return () if any(p in q for p in LIST_ALL_PHRASES) else None

    async def _list_all(self) -> str:
        transactions = await self._store.list_all()
        if not transactions:
            return "Aucune transaction trouvée."
        return format_transaction_list("Voici toutes les transactions", transactions)

    async def _list_by_account(self, account_id: int) -> str:
        transactions = await self._store.list_by_account(account_id)
        if not transactions:
            return f"Aucune transaction trouvée pour le compte {account_id}."
        return format_transaction_list(
            f"Voici les transactions du compte {account_id}", transactions
        )

    async def _balance(self, account_id: int) -> str:
        balance = await self._store.balance(account_id)
        return f"Le solde du compte {account_id} est de {balance:.2f}"

    async def _list_by_status(self, status: TransactionStatus) -> str:
        transactions = await self._store.list_by_status(status)
        if not transactions:
            return f"Aucune transaction trouvée avec le statut {status.value}."
        return format_transaction_list(
            f"Voici les transactions avec le statut {status.value}", transactions
        )

    async def _get_by_id(self, transaction_id: int) -> str:
        transaction = await self._store.get(transaction_id)
        return "Détails de la transaction:\n" + format_transaction(transaction)

    async def _update_status(self, transaction_id: int, status: TransactionStatus) -> str:
        transaction = await self._store.update_status(transaction_id, status)
        return (
            f"Transaction {transaction_id} mise à jour avec succès. "
            f"Nouveau statut: {status.value}\nDétails: {format_transaction(transaction)}"
        )

    async def _create(
        self, account_id: int, amount: float, type: TransactionType
    ) -> str:
        transaction = await self._store.create(
            account_id, amount, type, TransactionStatus.PENDING
        )
        return "Transaction créée avec succès:\n" + format_transaction(transaction)

    async def _delete(self, transaction_id: int) -> str:
        if await self._store.delete(transaction_id):
            return f"Transaction {transaction_id} supprimée avec succès"
        return f"Transaction non trouvée avec l'ID: {transaction_id}"


def _regex(pattern: re.Pattern, *converters: Callable[[str], Any]) -> Callable[[str], tuple | None]:
    """Build a matcher converting each captured group in order."""

    def match(question: str) -> tuple | None:
        m = pattern.search(question)
        if m is None:
            return None
        return tuple(convert(group) for convert, group in zip(converters, m.groups()))

    return match
