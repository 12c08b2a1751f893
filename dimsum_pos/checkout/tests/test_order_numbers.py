import random
import re
from datetime import date

import pytest

from dimsum_pos.checkout.order_numbers import (
    RandomOrderNumberGenerator,
    SequentialOrderNumberGenerator,
    get_order_number_generator,
)
from dimsum_pos.config import set_config_for_test

DAY = date(2026, 10, 19)


def test_random_format():
    gen = RandomOrderNumberGenerator(rng=random.Random(1))
    for _ in range(50):
        assert re.fullmatch(r"ORD-20261019-\d{4}", gen.next_number(DAY))


def test_sequence_counts_per_day():
    gen = SequentialOrderNumberGenerator()
    assert gen.next_number(DAY) == "ORD-20261019-0001"
    assert gen.next_number(DAY) == "ORD-20261019-0002"
    assert gen.next_number(date(2026, 10, 20)) == "ORD-20261020-0001"


def test_sequence_resumes_and_exhausts():
    gen = SequentialOrderNumberGenerator(start_after={DAY: 9998})
    assert gen.next_number(DAY) == "ORD-20261019-9999"
    with pytest.raises(OverflowError):
        gen.next_number(DAY)


def test_strategy_from_config():
    set_config_for_test(order_number_strategy="sequence")
    assert isinstance(get_order_number_generator(), SequentialOrderNumberGenerator)
    set_config_for_test(order_number_strategy="random")
    assert isinstance(get_order_number_generator(), RandomOrderNumberGenerator)
    with pytest.raises(ValueError):
        get_order_number_generator("uuid")
