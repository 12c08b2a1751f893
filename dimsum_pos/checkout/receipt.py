"""Plain-text receipts.

The layout is fixed-width and depends only on the transaction and the
outlet settings, so re-rendering a stored transaction reproduces the same
bytes.
"""
from __future__ import annotations

from typing import List, Optional

from dimsum_pos.config import get_config
from dimsum_pos.data.models import PaymentMethod, StoredTransaction

TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M:%S"
LABEL_WIDTH = 13


def format_amount(amount: int, prefix: Optional[str] = None) -> str:
    """Format a whole-unit amount as ``Rp 18.000``."""
    if prefix is None:
        prefix = get_config().currency_prefix
    sign = "-" if amount < 0 else ""
    grouped = f"{abs(int(amount)):,}".replace(",", ".")
    return f"{sign}{prefix} {grouped}"


def _field(label: str, value: str) -> str:
    return f"{label:<{LABEL_WIDTH}}: {value}"


def render_receipt(
    transaction: StoredTransaction,
    store_name: Optional[str] = None,
    width: Optional[int] = None,
) -> str:
    config = get_config()
    store_name = store_name or config.store_name
    width = width or config.receipt_width

    def money(amount: int) -> str:
        return format_amount(amount, config.currency_prefix)

    heavy = "=" * width
    light = "-" * width

    lines: List[str] = [
        heavy,
        store_name.center(width).rstrip(),
        "Payment Receipt".center(width).rstrip(),
        heavy,
        _field("Order No.", transaction.order_number),
        _field("Date", transaction.created_at.strftime(TIMESTAMP_FORMAT)),
        _field("Branch", transaction.branch),
        heavy,
        "",
        "ORDER:",
        light,
    ]
    for item in transaction.line_items:
        lines.append(f"{item.display_name} ({item.variant_label})")
        lines.append(
            f" {item.quantity} x {money(item.unit_price)} = {money(item.line_total)}"
        )
    lines += [light, "", _field("Subtotal", money(transaction.subtotal))]
    if transaction.tax > 0:
        lines.append(_field("Tax", money(transaction.tax)))
    lines += [
        _field("TOTAL", money(transaction.total)),
        "",
        _field("Payment", transaction.payment_method.display_name),
    ]
    if transaction.payment_method is PaymentMethod.CASH:
        lines.append(_field("Cash", money(transaction.tendered_amount)))
        lines.append(_field("Change", money(transaction.change_amount)))
    lines += [
        "",
        heavy,
        "Thank You For Your Visit!".center(width).rstrip(),
        "See You Again!".center(width).rstrip(),
        heavy,
    ]
    return "\n".join(lines) + "\n"


def receipt_filename(transaction: StoredTransaction) -> str:
    return f"receipt-{transaction.order_number}.txt"
