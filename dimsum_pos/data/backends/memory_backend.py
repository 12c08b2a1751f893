from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional
from uuid import uuid4

from ..interface import TransactionStore
from ..models import StoredTransaction, TransactionFilters, TransactionRecord


def matches_filters(txn: StoredTransaction, filters: TransactionFilters) -> bool:
    """Apply a TransactionFilters to one stored transaction."""
    if filters.start_ts and txn.created_at < filters.start_ts:
        return False
    if filters.end_ts and txn.created_at >= filters.end_ts:
        return False
    if filters.branch_id:
        if isinstance(filters.branch_id, str):
            if txn.branch_id != filters.branch_id:
                return False
        elif txn.branch_id not in filters.branch_id:
            return False
    if filters.order_search and filters.order_search.strip():
        if filters.order_search.strip().lower() not in txn.order_number.lower():
            return False
    return True


class InMemoryTransactionStore(TransactionStore):
    """
    Process-local store.
    - Keeps stored transactions in insertion order.
    - `clock` supplies the server-side `created_at`, so tests can pin time.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or datetime.now
        self._rows: List[StoredTransaction] = []

    def create_transaction(self, record: TransactionRecord) -> StoredTransaction:
        stored = StoredTransaction(
            **record.model_dump(),
            id=str(uuid4()),
            created_at=self._clock(),
        )
        self._rows.append(stored)
        return stored.model_copy(deep=True)

    def list_transactions(self, filters: TransactionFilters) -> List[StoredTransaction]:
        rows = [t.model_copy(deep=True) for t in self._rows if matches_filters(t, filters)]
        return sorted(rows, key=lambda t: t.created_at, reverse=True)
