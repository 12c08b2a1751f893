# dimsum_pos/reporting/service.py
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from dimsum_pos.config import get_config
from dimsum_pos.data.interface import TransactionStore
from dimsum_pos.data.models import ReportingWindow, StoredTransaction, TransactionFilters
from dimsum_pos.logging import get_logger

from .aggregator import build_report
from .export import export_transactions_csv
from .periods import ReportPeriod, resolve_period



class SalesReport(BaseModel):
    """A report query result: the listed transactions and their aggregates."""
    period: ReportPeriod
    start_ts: Optional[datetime] = None
    end_ts: Optional[datetime] = None
    transactions: List[StoredTransaction] = Field(default_factory=list)
    window: ReportingWindow = Field(default_factory=ReportingWindow)
    degraded: bool = Field(default=False, description="True when the store could not be read")

    def to_csv(self) -> str:
        return export_transactions_csv(self.transactions, summary=self.window.summary)


class SalesReportService:
    """
    Dashboard queries over a TransactionStore.
    - Period presets resolve to a half-open window anchored at `now`.
    - A failing read yields an empty, flagged report instead of an error.
    """

    def __init__(self, store: TransactionStore) -> None:
        self.store = store
        self.logger = get_logger(__name__)

    def report(
        self,
        period: ReportPeriod | str = ReportPeriod.TODAY,
        now: Optional[datetime] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        branch_id: Optional[str | list[str]] = None,
        order_search: Optional[str] = None,
    ) -> SalesReport:
        now = now or datetime.now()
        bounds = resolve_period(period, now=now, start_date=start_date, end_date=end_date)
        period = ReportPeriod(period)
        filters = TransactionFilters(
            start_ts=bounds.start_ts,
            end_ts=bounds.end_ts,
            branch_id=branch_id,
            order_search=order_search,
        )

        config = get_config()
        degraded = False
        try:
            transactions = self.store.list_transactions(filters)
        except Exception:
            self.logger.exception(f"Could not load transactions for {period.value} report")
            transactions, degraded = [], True

        window = build_report(
            transactions,
            today=now.date(),
            top_limit=config.top_items_limit,
            days=config.daily_series_days,
        )
        self.logger.debug(
            f"Report {period.value}: {window.summary.transaction_count} transactions,"
            f" revenue {window.summary.total_revenue}"
        )
        return SalesReport(
            period=period,
            start_ts=bounds.start_ts,
            end_ts=bounds.end_ts,
            transactions=transactions,
            window=window,
            degraded=degraded,
        )
