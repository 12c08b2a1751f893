from datetime import date, datetime

import pytest

from dimsum_pos.config import set_config_for_test
from dimsum_pos.data.models import CartLine, StoredTransaction
from dimsum_pos.reporting.aggregator import (
    build_report,
    compute_daily_series,
    compute_summary,
    compute_top_items,
)

TODAY = date(2026, 10, 19)


@pytest.fixture(autouse=True)
def test_config():
    set_config_for_test(log_level="WARNING")


def line(name, variant, price, qty):
    return CartLine(line_id=f"{name}-{variant}", menu_item_id=name, display_name=name,
                    variant_label=variant, unit_price=price, quantity=qty)


def txn(total, created_at, items=None, order_number="ORD-20261019-0001"):
    items = items if items is not None else [line("Ekado", "Small", total, 1)]
    return StoredTransaction(
        id=order_number,
        order_number=order_number,
        branch="Outlet 1",
        line_items=items,
        subtotal=total,
        total=total,
        payment_method="qris",
        tendered_amount=total,
        created_at=created_at,
    )


def test_summary_example():
    """Totals 10000, 20000 and 30000 give revenue 60000 over 3 tickets, average 20000."""
    rows = [txn(t, datetime(2026, 10, 19, 10)) for t in (10000, 20000, 30000)]
    summary = compute_summary(rows)
    assert summary.total_revenue == 60000
    assert summary.transaction_count == 3
    assert summary.average_ticket == 20000


def test_summary_empty():
    summary = compute_summary([])
    assert (summary.total_revenue, summary.transaction_count, summary.average_ticket) == (0, 0, 0)


def test_daily_series_always_seven_days_oldest_first():
    series = compute_daily_series([], today=TODAY)
    assert len(series) == 7
    assert [d.day for d in series] == [date(2026, 10, d) for d in range(13, 20)]
    assert all(d.revenue == 0 for d in series)
    assert series[0].label == "13 Oct"
    assert series[-1].label == "19 Oct"


def test_daily_series_buckets_by_calendar_day():
    rows = [
        txn(10000, datetime(2026, 10, 19, 8, 0)),
        txn(5000, datetime(2026, 10, 19, 23, 59, 59)),
        txn(7000, datetime(2026, 10, 13, 0, 0)),
        txn(99000, datetime(2026, 10, 12, 23, 59)),
        txn(1000, datetime(2026, 10, 20, 0, 1)),
    ]
    series = compute_daily_series(rows, today=TODAY)
    assert len(series) == 7
    by_day = {d.day: d.revenue for d in series}
    assert by_day[date(2026, 10, 19)] == 15000
    assert by_day[date(2026, 10, 13)] == 7000
    assert sum(by_day.values()) == 22000


def test_daily_series_accepts_raw_records():
    rows = [
        {"total": 4000, "created_at": "2026-10-18T09:00:00"},
        {"total": 6000, "created_at": "not a date"},
        {"created_at": "2026-10-18T10:00:00"},
    ]
    series = compute_daily_series(rows, today=TODAY)
    assert [d.revenue for d in series][-2] == 4000


def test_top_items_groups_by_name_and_variant():
    rows = [
        txn(61000, datetime(2026, 10, 19), [line("Siomay", "Small", 18000, 2), line("Hakau", "Regular", 25000, 1)]),
        txn(48000, datetime(2026, 10, 19), [line("Siomay", "Small", 18000, 1), line("Siomay", "Large", 30000, 1)]),
    ]
    top = compute_top_items(rows)
    assert [(t.key, t.units_sold, t.revenue) for t in top] == [
        ("Siomay (Small)", 3, 54000),
        ("Hakau (Regular)", 1, 25000),
        ("Siomay (Large)", 1, 30000),
    ]


def test_top_items_limits_to_five_and_is_sorted():
    items = [line(f"Item{i}", "Regular", 1000, qty) for i, qty in enumerate([1, 4, 2, 6, 3, 5, 2])]
    top = compute_top_items([txn(0, datetime(2026, 10, 19), items)])
    assert len(top) == 5
    units = [t.units_sold for t in top]
    assert units == sorted(units, reverse=True)
    assert [t.item_name for t in top] == ["Item3", "Item5", "Item1", "Item4", "Item2"]


def test_top_items_ties_keep_first_seen_order():
    items = [line("B", "x", 1000, 2), line("A", "x", 1000, 2), line("C", "x", 1000, 2)]
    top = compute_top_items([txn(0, datetime(2026, 10, 19), items)])
    assert [t.item_name for t in top] == ["B", "A", "C"]


def test_top_items_treats_malformed_line_items_as_empty():
    rows = [
        {"total": 1000, "items": None},
        {"total": 1000, "items": "Siomay x2"},
        {"total": 1000},
        {"total": 3000, "items": [{"name": "Ekado", "variant": "Small", "price": 1500, "quantity": 2}]},
    ]
    top = compute_top_items(rows)
    assert [(t.key, t.units_sold, t.revenue) for t in top] == [("Ekado (Small)", 2, 3000)]
    assert compute_top_items([]) == []


def test_build_report_empty():
    report = build_report([], today=TODAY)
    assert report.summary.transaction_count == 0
    assert len(report.daily_series) == 7
    assert report.top_items == []
