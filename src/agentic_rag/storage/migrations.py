"""Idempotent database schema creation."""

from __future__ import annotations

import aiosqlite

TRANSACTIONS_TABLE = """
CREATE TABLE IF NOT EXISTS transactions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    date TEXT NOT NULL,
    account_id INTEGER NOT NULL,
    amount REAL NOT NULL,
    type TEXT NOT NULL CHECK (type IN ('DEBIT', 'CREDIT')),
    status TEXT NOT NULL CHECK (status IN ('PENDING', 'EXECUTED', 'CANCELED'))
)
"""

TRANSACTIONS_ACCOUNT_INDEX = """
CREATE INDEX IF NOT EXISTS idx_transactions_account_id ON transactions(account_id)
"""

TRANSACTIONS_STATUS_INDEX = """
CREATE INDEX IF NOT EXISTS idx_transactions_status ON transactions(status)
"""


async def initialize_transactions_db(db_path: str) -> None:
    async with aiosqlite.connect(db_path) as db:
        await db.execute(TRANSACTIONS_TABLE)
        await db.execute(TRANSACTIONS_ACCOUNT_INDEX)
        await db.execute(TRANSACTIONS_STATUS_INDEX)
        await db.commit()
