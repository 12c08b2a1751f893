# dimsum_pos/reporting/aggregator.py
"""Sales aggregation over already-filtered transactions.

None of these functions raise on bad data: an empty list gives zeroed
figures, and a transaction whose line items are missing or not a list
contributes no items. Inputs may be `StoredTransaction` models or raw
mappings as read from a backend.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Iterable, List, Optional

import pandas as pd

from dimsum_pos.data.models import DailyRevenue, ReportingWindow, ReportSummary, TopItem

from .records import as_amount, local_date, record_field, record_line_items

DAILY_SERIES_DAYS = 7
TOP_ITEMS_LIMIT = 5


def day_label(day: date) -> str:
    return f"{day.day} {day:%b}"


# ---------- aggregations ----------

def compute_summary(transactions: Iterable[Any]) -> ReportSummary:
    totals = [as_amount(record_field(t, "total")) for t in transactions]
    revenue = sum(totals)
    count = len(totals)
    return ReportSummary(
        total_revenue=revenue,
        transaction_count=count,
        average_ticket=revenue / count if count > 0 else 0,
    )


def compute_daily_series(
    transactions: Iterable[Any],
    today: Optional[date] = None,
    days: int = DAILY_SERIES_DAYS,
) -> List[DailyRevenue]:
    """Revenue per calendar day for the `days` days ending `today`, oldest first."""
    today = today or date.today()
    buckets = pd.Series(
        0,
        index=[today - timedelta(days=offset) for offset in range(days - 1, -1, -1)],
        dtype="int64",
    )

    rows = [(local_date(record_field(t, "created_at")), as_amount(record_field(t, "total"))) for t in transactions]
    frame = pd.DataFrame(rows, columns=["day", "total"])
    frame = frame[frame["day"].isin(buckets.index)]
    if not frame.empty:
        per_day = frame.groupby("day")["total"].sum()
        buckets = buckets.add(per_day.reindex(buckets.index, fill_value=0)).astype("int64")

    return [
        DailyRevenue(day=day, label=day_label(day), revenue=int(revenue))
        for day, revenue in buckets.items()
    ]


def compute_top_items(transactions: Iterable[Any], limit: int = TOP_ITEMS_LIMIT) -> List[TopItem]:
    """Best sellers by units, grouped by (item name, variant); ties keep first-seen order."""
    rows = []
    for txn in transactions:
        for item in record_line_items(txn):
            quantity = as_amount(record_field(item, "quantity"))
            rows.append({
                "item_name": str(record_field(item, "display_name", "name", default="")),
                "variant_label": str(record_field(item, "variant_label", "variant", default="")),
                "units_sold": quantity,
                "revenue": as_amount(record_field(item, "unit_price", "price")) * quantity,
            })
    if not rows:
        return []

    df = pd.DataFrame(rows)
    df["first_seen"] = range(len(df))
    agg = (
        df.groupby(["item_name", "variant_label"], as_index=False, sort=False)
          .agg(units_sold=("units_sold", "sum"), revenue=("revenue", "sum"), first_seen=("first_seen", "min"))
          .sort_values(["units_sold", "first_seen"], ascending=[False, True])
          .head(int(limit))
    )
    return [
        TopItem(
            item_name=row["item_name"],
            variant_label=row["variant_label"],
            units_sold=int(row["units_sold"]),
            revenue=int(row["revenue"]),
        )
        for row in agg.to_dict(orient="records")
    ]


def build_report(
    transactions: Iterable[Any],
    today: Optional[date] = None,
    top_limit: int = TOP_ITEMS_LIMIT,
    days: int = DAILY_SERIES_DAYS,
) -> ReportingWindow:
    transactions = list(transactions)
    return ReportingWindow(
        summary=compute_summary(transactions),
        daily_series=compute_daily_series(transactions, today=today, days=days),
        top_items=compute_top_items(transactions, limit=top_limit),
    )
