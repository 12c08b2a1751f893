from __future__ import annotations

import csv
import io
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional

import pandas as pd

from dimsum_pos.data.models import ReportSummary

from .aggregator import compute_summary
from .records import as_amount, record_field, record_line_items

EXPORT_COLUMNS = ["Date", "Order", "Items", "Total", "Payment"]
EXPORT_TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M:%S"


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def search_transactions(transactions: Iterable[Any], term: str) -> list:
    """Keep transactions whose order number contains `term` (case-insensitive)."""
    needle = (term or "").strip().lower()
    return [t for t in transactions if needle in str(record_field(t, "order_number", default="")).lower()]


def _items_cell(txn: Any) -> str:
    return "; ".join(
        f"{record_field(item, 'display_name', 'name', default='')} "
        f"({record_field(item, 'variant_label', 'variant', default='')}) x{as_amount(record_field(item, 'quantity'))}"
        for item in record_line_items(txn)
    )


def _date_cell(txn: Any) -> str:
    created = record_field(txn, "created_at")
    if hasattr(created, "strftime"):
        return created.strftime(EXPORT_TIMESTAMP_FORMAT)
    return str(created or "")


def _payment_cell(txn: Any) -> str:
    method = record_field(txn, "payment_method", default="")
    return str(getattr(method, "value", method))


def transactions_frame(transactions: Iterable[Any]) -> pd.DataFrame:
    """One row per transaction, columns in export order."""
    rows = [
        [
            _date_cell(t),
            str(record_field(t, "order_number", default="")),
            _items_cell(t),
            as_amount(record_field(t, "total")),
            _payment_cell(t),
        ]
        for t in transactions
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def export_transactions_csv(
    transactions: Iterable[Any],
    summary: Optional[ReportSummary] = None,
    include_summary: bool = True,
) -> str:
    """Serialize transactions as CSV with a trailing statistics block.

    The header row is unquoted; every data cell is quoted.
    """
    transactions = list(transactions)
    frame = transactions_frame(transactions)

    buf = io.StringIO()
    buf.write(",".join(EXPORT_COLUMNS) + "\n")
    frame.to_csv(buf, header=False, index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")

    if include_summary:
        summary = summary or compute_summary(transactions)
        writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow([])
        writer.writerow(["Total Revenue", summary.total_revenue])
        writer.writerow(["Transactions", summary.transaction_count])
        writer.writerow(["Average Ticket", round_half_up(summary.average_ticket)])
    return buf.getvalue()


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"sales-report-{today.isoformat()}.csv"
