"""Protocol for the transaction store used by the tool layer."""

from __future__ import annotations

from typing import Protocol

from agentic_rag.models.domain import Transaction, TransactionStatus, TransactionType


class TransactionStore(Protocol):
    async def list_all(self) -> list[Transaction]: ...

    async def list_by_account(self, account_id: int) -> list[Transaction]: ...

    async def list_by_status(self, status: TransactionStatus) -> list[Transaction]: ...

    async def get(self, transaction_id: int) -> Transaction:
        """Raises TransactionNotFoundError when absent."""
        ...

    async def create(
        self,
        account_id: int,
        amount: float,
        type: TransactionType,
        status: TransactionStatus = TransactionStatus.PENDING,
    ) -> Transaction: ...

    async def update_status(
        self, transaction_id: int, status: TransactionStatus
    ) -> Transaction: ...

    async def delete(self, transaction_id: int) -> bool: ...

    async def balance(self, account_id: int) -> float: ...

    async def count(self) -> int: ...
