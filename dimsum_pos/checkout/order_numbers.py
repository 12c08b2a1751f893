from __future__ import annotations

import random
from datetime import date
from typing import Dict, Optional, Protocol

from dimsum_pos.config import get_config

ORDER_PREFIX = "ORD"
SUFFIX_SPACE = 10_000


def format_order_number(day: date, suffix: int) -> str:
    return f"{ORDER_PREFIX}-{day:%Y%m%d}-{suffix:04d}"


class OrderNumberGenerator(Protocol):
    def next_number(self, day: date) -> str:
        ...


class RandomOrderNumberGenerator:
    """ORD-YYYYMMDD-NNNN with a random 4-digit suffix.

    Collisions within a day are possible (10,000 suffixes per day).
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def next_number(self, day: date) -> str:
        return format_order_number(day, self._rng.randrange(SUFFIX_SPACE))


class SequentialOrderNumberGenerator:
    """ORD-YYYYMMDD-NNNN from a per-day counter starting at 0001.

    Unique per generator instance for up to 9,999 orders a day.
    """

    def __init__(self, start_after: Optional[Dict[date, int]] = None) -> None:
        self._counters: Dict[date, int] = dict(start_after or {})

    def next_number(self, day: date) -> str:
        value = self._counters.get(day, 0) + 1
        if value >= SUFFIX_SPACE:
            raise OverflowError(f"Order number space exhausted for {day.isoformat()}")
        self._counters[day] = value
        return format_order_number(day, value)


def get_order_number_generator(strategy: str = None) -> OrderNumberGenerator:
    if strategy is None:
        strategy = get_config().order_number_strategy
    if strategy == "random":
        return RandomOrderNumberGenerator()
    if strategy == "sequence":
        return SequentialOrderNumberGenerator()
    raise ValueError(f"Unknown order number strategy: {strategy}")
