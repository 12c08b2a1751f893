from __future__ import annotations

from typing import Literal

from dimsum_pos.config import get_config

from .backends.csv_backend import CsvCatalogProvider, CsvTransactionStore
from .backends.memory_backend import InMemoryTransactionStore
from .interface import CatalogProvider, TransactionStore


def get_transaction_store(kind: Literal["csv", "memory"] = "csv") -> TransactionStore:
    if kind == "csv":
        # Reads from configured CSV folder
        config = get_config()
        return CsvTransactionStore(data_dir=config.data_dir)
    if kind == "memory":
        return InMemoryTransactionStore()
    raise ValueError(f"Unknown transaction store kind: {kind}")


def get_catalog_provider(kind: Literal["csv"] = "csv") -> CatalogProvider:
    if kind == "csv":
        config = get_config()
        return CsvCatalogProvider(data_dir=config.data_dir)
    raise ValueError(f"Unknown catalog provider kind: {kind}")
