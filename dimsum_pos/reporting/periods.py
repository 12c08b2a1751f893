from __future__ import annotations

from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, Field

from dimsum_pos.errors import InvalidReportPeriodError


class ReportPeriod(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"
    CUSTOM = "custom"


class ReportWindowBounds(BaseModel):
    """Half-open ``[start_ts, end_ts)`` window; a missing bound is unbounded."""
    start_ts: Optional[datetime] = Field(default=None, description="Inclusive start")
    end_ts: Optional[datetime] = Field(default=None, description="Exclusive end")

    def as_tuple(self) -> Tuple[Optional[datetime], Optional[datetime]]:
        return self.start_ts, self.end_ts


def resolve_period(
    period: ReportPeriod | str,
    now: Optional[datetime] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> ReportWindowBounds:
    """Turn a preset into a concrete window anchored at `now`.

    `custom` takes inclusive calendar dates and requires both of them.
    """
    try:
        period = ReportPeriod(period)
    except ValueError as e:
        raise InvalidReportPeriodError(f"Unknown report period: {period!r}") from e

    now = now or datetime.now()
    if period is ReportPeriod.TODAY:
        return ReportWindowBounds(start_ts=datetime.combine(now.date(), time.min), end_ts=now)
    if period is ReportPeriod.WEEK:
        return ReportWindowBounds(start_ts=now - timedelta(days=7), end_ts=now)
    if period is ReportPeriod.MONTH:
        return ReportWindowBounds(start_ts=now - timedelta(days=30), end_ts=now)
    if period is ReportPeriod.ALL:
        return ReportWindowBounds()

    if start_date is None or end_date is None:
        raise InvalidReportPeriodError("Custom period requires both a start and an end date")
    if end_date < start_date:
        raise InvalidReportPeriodError(f"End date {end_date} is before start date {start_date}")
    return ReportWindowBounds(
        start_ts=datetime.combine(start_date, time.min),
        end_ts=datetime.combine(end_date + timedelta(days=1), time.min),
    )
