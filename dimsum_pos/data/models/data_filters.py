from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TransactionFilters(BaseModel):
    """Filters for listing persisted transactions.

    The time window is half-open: ``start_ts <= created_at < end_ts``.
    """
    start_ts: Optional[datetime] = Field(default=None, description="Inclusive lower bound on created_at")
    end_ts: Optional[datetime] = Field(default=None, description="Exclusive upper bound on created_at")
    branch_id: Optional[str | list[str]] = Field(default=None, description="Branch filter (single branch or list of branches)")
    order_search: Optional[str] = Field(default=None, description="Case-insensitive order-number substring")
