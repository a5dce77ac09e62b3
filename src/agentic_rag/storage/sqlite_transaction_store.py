"""SQLite-backed transaction store."""

from __future__ import annotations

from datetime import datetime, timezone

import aiosqlite

from agentic_rag.exceptions import TransactionNotFoundError
from agentic_rag.models.domain import Transaction, TransactionStatus, TransactionType
from agentic_rag.observability.logger import get_logger
from agentic_rag.storage.migrations import initialize_transactions_db

logger = get_logger("transaction_store")


class SQLiteTransactionStore:
    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    async def initialize(self) -> None:
        await initialize_transactions_db(self._db_path)

    async def list_all(self) -> list[Transaction]:
        return await self._select("SELECT * FROM transactions ORDER BY id")

    async def list_by_account(self, account_id: int) -> list[Transaction]:
        return await self._select(
            "SELECT * FROM transactions WHERE account_id = ? ORDER BY id", (account_id,)
        )

    async def list_by_status(self, status: TransactionStatus) -> list[Transaction]:
        return await self._select(
            "SELECT * FROM transactions WHERE status = ? ORDER BY id", (status.value,)
        )

    async def get(self, transaction_id: int) -> Transaction:
        rows = await self._select("SELECT * FROM transactions WHERE id = ?", (transaction_id,))
        if not rows:
            raise TransactionNotFoundError(transaction_id)
        return rows[0]

    async def create(
        self,
        account_id: int,
        amount: float,
        type: TransactionType,
        status: TransactionStatus = TransactionStatus.PENDING,
    ) -> Transaction:
        date = datetime.now(timezone.utc)
        async with aiosqlite.connect(self._db_path) as db:
            cursor = await db.execute(
                "INSERT INTO transactions (date, account_id, amount, type, status) "
                "VALUES (?, ?, ?, ?, ?)",
                (date.isoformat(), account_id, amount, type.value, status.value),
            )
            await db.commit()
            new_id = cursor.lastrowid
        logger.info(
            "transaction_created",
            id=new_id,
            account_id=account_id,
            amount=amount,
            type=type.value,
            status=status.value,
        )
        return Transaction(
            id=new_id,
            account_id=account_id,
            amount=amount,
            type=type,
            status=status,
            date=date,
        )

    async def update_status(
        self, transaction_id: int, status: TransactionStatus
    ) -> Transaction:
        async with aiosqlite.connect(self._db_path) as db:
            cursor = await db.execute(
                "UPDATE transactions SET status = ? WHERE id = ?",
                (status.value, transaction_id),
            )
            await db.commit()
            if cursor.rowcount == 0:
                raise TransactionNotFoundError(transaction_id)
        logger.info("transaction_status_updated", id=transaction_id, status=status.value)
        return await self.get(transaction_id)

    async def delete(self, transaction_id: int) -> bool:
        async with aiosqlite.connect(self._db_path) as db:
            cursor = await db.execute(
                "DELETE FROM transactions WHERE id = ?", (transaction_id,)
            )
            await db.commit()
            deleted = cursor.rowcount > 0
        logger.info("transaction_deleted", id=transaction_id, deleted=deleted)
        return deleted

    async def balance(self, account_id: int) -> float:
        """Sum of credits minus sum of debits for the account."""
        async with aiosqlite.connect(self._db_path) as db:
            async with db.execute(
                "SELECT COALESCE(SUM(CASE WHEN type = 'CREDIT' THEN amount "
                "WHEN type = 'DEBIT' THEN -amount ELSE 0 END), 0) "
                "FROM transactions WHERE account_id = ?",
                (account_id,),
            ) as cursor:
                row = await cursor.fetchone()
                return float(row[0]) if row else 0.0

    async def count(self) -> int:
        async with aiosqlite.connect(self._db_path) as db:
            async with db.execute("SELECT COUNT(*) FROM transactions") as cursor:
                row = await cursor.fetchone()
                return row[0] if row else 0

    async def _select(self, query: str, params: tuple = ()) -> list[Transaction]:
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            async with db.execute(query, params) as cursor:
                rows = await cursor.fetchall()
                return [self._row_to_transaction(row) for row in rows]

    @staticmethod
    def _row_to_transaction(row: aiosqlite.Row) -> Transaction:
        date = datetime.fromisoformat(row["date"])
        if date.tzinfo is None:
            date = date.replace(tzinfo=timezone.utc)
        return Transaction(
            id=row["id"],
            account_id=row["account_id"],
            amount=row["amount"],
            type=TransactionType(row["type"]),
            status=TransactionStatus(row["status"]),
            date=date,
        )
