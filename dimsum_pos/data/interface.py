# dimsum_pos/data/interface.py
from __future__ import annotations

from typing import List, Protocol

from .models import (
    Catalog,
    StoredTransaction,
    TransactionFilters,
    TransactionRecord,
)


# ---- Data access protocols ----

class CatalogProvider(Protocol):
    """Read-only source of the menu shown at the till."""

    def load_catalog(self) -> Catalog:
        """Return categories and available menu items with their variants."""
        ...


class TransactionStore(Protocol):
    """
    Backend-agnostic persistence contract for completed transactions.

    - `create_transaction` either durably records the transaction or raises;
      there is no partially written state visible to the caller.
    - Implementations MUST NOT cache `list_transactions` results.
      Each call reads the current contents of the underlying source.
    """

    def create_transaction(self, record: TransactionRecord) -> StoredTransaction:
        """Persist a record, assigning `id` and `created_at`."""
        ...

    def list_transactions(self, filters: TransactionFilters) -> List[StoredTransaction]:
        """List transactions matching the filters, newest first."""
        ...
