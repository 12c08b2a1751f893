from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional
from uuid import uuid4

import pandas as pd
from pydantic import ValidationError

from dimsum_pos.config import get_config
from dimsum_pos.errors import PersistenceError
from dimsum_pos.logging import get_logger

from ..interface import CatalogProvider, TransactionStore
from ..models import (
    Catalog, MenuItem, MenuVariant, StoredTransaction, TransactionFilters, TransactionRecord,
)

logger = get_logger(__name__)

TRANSACTION_COLUMNS = [
    "id", "order_number", "branch_id", "branch", "cashier_id", "items",
    "subtotal", "tax", "total", "payment_method", "cash_amount", "change_amount",
    "created_at",
]
_OPTIONAL_COLUMNS = ("branch_id", "cashier_id")


def resolve_data_dir(data_dir: str | Path = None) -> Path:
    """Resolve `data_dir` (default: config) against the repository root when relative."""
    if data_dir is None:
        data_dir = get_config().data_dir

    path = Path(data_dir)
    if path.is_absolute():
        return path

    # Look up the directory tree for pyproject.toml
    current = Path.cwd()
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            return parent / path
    return current / path


@dataclass
class _MenuTables:
    categories: pd.DataFrame
    menu_items: pd.DataFrame
    variants: pd.DataFrame


class CsvCatalogProvider(CatalogProvider):
    """
    CSV-backed menu catalog.
    - Reads categories.csv, menu_items.csv and menu_variants.csv from `data_dir`.
    - Only available items are served, ordered by name; variants keep file order.
    """

    required_files = ["categories.csv", "menu_items.csv", "menu_variants.csv"]

    def __init__(self, data_dir: str | Path = None) -> None:
        self.data_dir = resolve_data_dir(data_dir)

    # ---------- loading helpers ----------

    def _load_tables(self) -> _MenuTables:
        if not self.data_dir.exists():
            raise FileNotFoundError(
                f"Data directory not found: {self.data_dir}\n"
                f"Please either:\n"
                f"  1. Generate sample data: dimsum-seed\n"
                f"  2. Set DATA_DIR environment variable to point to your data directory"
            )

        missing_files = [f for f in self.required_files if not (self.data_dir / f).exists()]
        if missing_files:
            raise FileNotFoundError(
                f"Required CSV files missing in {self.data_dir}:\n"
                f"  Missing: {', '.join(missing_files)}\n"
                f"  Expected files: {', '.join(self.required_files)}"
            )

        try:
            categories = pd.read_csv(self.data_dir / "categories.csv", dtype=str)
            menu_items = pd.read_csv(
                self.data_dir / "menu_items.csv", dtype=str, keep_default_na=False
            )
            variants = pd.read_csv(self.data_dir / "menu_variants.csv", dtype={"id": str, "menu_item_id": str, "size": str})
        except Exception as e:
            raise RuntimeError(
                f"Error reading catalog CSV files from {self.data_dir}: {e}\n"
                f"Please check that the CSV files are valid and readable."
            ) from e

        # Normalize names to avoid collisions
        categories = categories.rename(columns={"id": "category_id", "name": "category"})
        return _MenuTables(categories=categories, menu_items=menu_items, variants=variants)

    # ---------- interface implementation ----------

    def load_catalog(self) -> Catalog:
        tables = self._load_tables()

        items = (
            tables.menu_items.merge(tables.categories, on="category_id", how="left")
                             .copy()
        )
        items["is_available"] = items["is_available"].str.lower().isin(["true", "1", "yes"])
        items = items[items["is_available"]].sort_values("name", kind="stable")

        variants_by_item = {
            item_id: [
                MenuVariant(
                    id=row["id"],
                    parent_item_id=item_id,
                    size_label=row["size"],
                    unit_price=int(row["price"]),
                )
                for row in group.to_dict(orient="records")
            ]
            for item_id, group in tables.variants.groupby("menu_item_id", sort=False)
        }

        menu = [
            MenuItem(
                id=row["id"],
                name=row["name"],
                category=row["category"] if isinstance(row["category"], str) else "",
                emoji=row.get("emoji") or None,
                is_available=True,
                variants=variants_by_item.get(row["id"], []),
            )
            for row in items.to_dict(orient="records")
        ]
        categories = tables.categories["category"].dropna().sort_values().tolist()
        logger.debug(f"Loaded catalog: {len(categories)} categories, {len(menu)} items")
        return Catalog(categories=categories, items=menu)


class CsvTransactionStore(TransactionStore):
    """
    CSV-backed transaction store.
    - Appends one row per transaction to `transactions.csv`; line items are a JSON column.
    - Every `list_transactions` call re-reads the file, mirroring a DB query.
    """

    filename = "transactions.csv"

    def __init__(
        self,
        data_dir: str | Path = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.data_dir = resolve_data_dir(data_dir)
        self.path = self.data_dir / self.filename
        self._clock = clock or datetime.now

    # ---------- row conversion helpers ----------

    @staticmethod
    def _to_row(stored: StoredTransaction) -> dict:
        return {
            "id": stored.id,
            "order_number": stored.order_number,
            "branch_id": stored.branch_id or "",
            "branch": stored.branch,
            "cashier_id": stored.cashier_id or "",
            "items": json.dumps([line.model_dump() for line in stored.line_items]),
            "subtotal": stored.subtotal,
            "tax": stored.tax,
            "total": stored.total,
            "payment_method": stored.payment_method.value,
            "cash_amount": stored.tendered_amount,
            "change_amount": stored.change_amount,
            "created_at": stored.created_at.isoformat(),
        }

    @staticmethod
    def _parse_items(raw: str) -> list:
        try:
            items = json.loads(raw) if raw else []
        except json.JSONDecodeError:
            return []
        return items if isinstance(items, list) else []

    @classmethod
    def _from_row(cls, row: dict) -> StoredTransaction:
        for col in _OPTIONAL_COLUMNS:
            row[col] = row.get(col) or None
        return StoredTransaction(
            id=row["id"],
            order_number=row["order_number"],
            branch_id=row["branch_id"],
            branch=row["branch"],
            cashier_id=row["cashier_id"],
            line_items=cls._parse_items(row["items"]),
            subtotal=row["subtotal"],
            tax=row["tax"] or 0,
            total=row["total"],
            payment_method=row["payment_method"],
            tendered_amount=row["cash_amount"],
            change_amount=row["change_amount"] or 0,
            created_at=row["created_at"],
        )

    def _read_frame(self) -> pd.DataFrame:
        if not self.path.exists():
            return pd.DataFrame(columns=TRANSACTION_COLUMNS)
        try:
            return pd.read_csv(self.path, dtype=str, keep_default_na=False)
        except Exception as e:
            raise PersistenceError(f"Error reading {self.path}: {e}") from e

    # ---------- interface implementation ----------

    def create_transaction(self, record: TransactionRecord) -> StoredTransaction:
        stored = StoredTransaction(
            **record.model_dump(),
            id=str(uuid4()),
            created_at=self._clock(),
        )
        frame = pd.DataFrame([self._to_row(stored)], columns=TRANSACTION_COLUMNS)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            frame.to_csv(self.path, mode="a", header=not self.path.exists(), index=False)
        except OSError as e:
            raise PersistenceError(f"Error writing transaction {record.order_number}: {e}") from e

        logger.info(f"Stored transaction {stored.order_number} ({stored.total}) as {stored.id}")
        return stored

    def list_transactions(self, filters: TransactionFilters) -> List[StoredTransaction]:
        df = self._read_frame()
        if df.empty:
            return []

        created = pd.to_datetime(df["created_at"], format="ISO8601", errors="coerce")
        mask = created.notna()
        if filters.start_ts:
            mask &= created >= pd.to_datetime(filters.start_ts)
        if filters.end_ts:
            mask &= created < pd.to_datetime(filters.end_ts)
        if filters.branch_id:
            if isinstance(filters.branch_id, str):
                mask &= df["branch_id"] == filters.branch_id
            else:
                mask &= df["branch_id"].isin(filters.branch_id)
        if filters.order_search and filters.order_search.strip():
            s = filters.order_search.strip().lower()
            mask &= df["order_number"].str.lower().str.contains(s, regex=False, na=False)

        flt = df.loc[mask].assign(_created=created[mask]).sort_values("_created", ascending=False, kind="stable")

        out: List[StoredTransaction] = []
        for row in flt.drop(columns="_created").to_dict(orient="records"):
            try:
                out.append(self._from_row(row))
            except ValidationError as e:
                logger.warning(f"Skipping unreadable transaction row {row.get('id')!r}: {e}")
        return out
