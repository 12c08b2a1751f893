"""Tolerant field access for transactions coming from any backend.

Transactions may be `StoredTransaction` models or raw mappings; a missing
or malformed field reads as empty rather than raising.
"""
from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Optional


def record_field(obj: Any, *names: str, default: Any = None) -> Any:
    """First of `names` present on `obj` (mapping key or attribute)."""
    for name in names:
        if isinstance(obj, Mapping):
            if name in obj:
                return obj[name]
        elif hasattr(obj, name):
            return getattr(obj, name)
    return default


def as_amount(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def local_date(value: Any) -> Optional[date]:
    """Calendar date of a timestamp in local time; aware values are converted first."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    if isinstance(value, date):
        return value
    return None


def record_line_items(txn: Any) -> list:
    """Line items of a transaction; anything that is not a list counts as none."""
    items = record_field(txn, "line_items", "items", default=None)
    return list(items) if isinstance(items, (list, tuple)) else []
