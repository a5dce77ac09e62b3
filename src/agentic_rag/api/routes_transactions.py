"""Read-only transaction listing."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from agentic_rag.api.dependencies import get_transaction_store
from agentic_rag.exceptions import TransactionNotFoundError
from agentic_rag.models.domain import Transaction
from agentic_rag.models.schemas import TransactionSchema
from agentic_rag.protocols.transaction_store import TransactionStore

router = APIRouter()


def to_schema(t: Transaction) -> TransactionSchema:
    return TransactionSchema(
        id=t.id,
        date=t.date,
        account_id=t.account_id,
        amount=t.amount,
        type=t.type.value,
        status=t.status.value,
    )


@router.get("/transactions", response_model=list[TransactionSchema])
async def list_transactions(
    store: TransactionStore = Depends(get_transaction_store),
) -> list[TransactionSchema]:
    return [to_schema(t) for t in await store.list_all()]


@router.get("/transactions/{transaction_id}", response_model=TransactionSchema)
async def get_transaction(
    transaction_id: int,
    store: TransactionStore = Depends(get_transaction_store),
) -> TransactionSchema:
    try:
        return to_schema(await store.get(transaction_id))
    except TransactionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
