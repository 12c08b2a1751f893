from __future__ import annotations

from datetime import date
from typing import List

from pydantic import BaseModel, Field


class ReportSummary(BaseModel):
    """Headline statistics for a report window."""
    total_revenue: int = Field(default=0, description="Sum of transaction totals")
    transaction_count: int = Field(default=0, description="Number of transactions")
    average_ticket: float = Field(default=0.0, description="total_revenue / transaction_count, 0 when empty")


class DailyRevenue(BaseModel):
    """Revenue for one calendar day."""
    day: date = Field(description="Calendar day")
    label: str = Field(description="Short label, e.g. '19 Oct'")
    revenue: int = Field(default=0, description="Sum of totals created on that day")


class TopItem(BaseModel):
    """Units and revenue for one (item, variant) pair."""
    item_name: str
    variant_label: str
    units_sold: int = 0
    revenue: int = 0

    @property
    def key(self) -> str:
        return f"{self.item_name} ({self.variant_label})"


class ReportingWindow(BaseModel):
    """Everything the sales dashboard shows, recomputed on each query."""
    summary: ReportSummary = Field(default_factory=ReportSummary)
    daily_series: List[DailyRevenue] = Field(default_factory=list)
    top_items: List[TopItem] = Field(default_factory=list)
