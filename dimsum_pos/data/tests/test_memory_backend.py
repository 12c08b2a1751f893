from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from dimsum_pos.config import set_config_for_test
from dimsum_pos.data.backends.memory_backend import InMemoryTransactionStore
from dimsum_pos.data.models import CartLine, TransactionFilters, TransactionRecord
from dimsum_pos.data.util import get_transaction_store

START = datetime(2026, 10, 19, 9, 0)


@pytest.fixture(autouse=True)
def test_config():
    set_config_for_test(log_level="WARNING")


def record(order_number, branch_id="b1", total=10000):
    return TransactionRecord(
        order_number=order_number,
        branch="Outlet 1",
        branch_id=branch_id,
        line_items=[CartLine(line_id="v1", menu_item_id="m1", display_name="Ekado",
                             variant_label="Small", unit_price=total, quantity=1)],
        subtotal=total,
        total=total,
        payment_method="qris",
        tendered_amount=total,
    )


@pytest.fixture
def store():
    ticks = iter(START + timedelta(hours=h) for h in range(100))
    return InMemoryTransactionStore(clock=lambda: next(ticks))


def test_create_assigns_id_and_created_at(store):
    stored = store.create_transaction(record("ORD-20261019-0001"))
    assert stored.id
    assert stored.created_at == START
    assert stored.order_number == "ORD-20261019-0001"


def test_list_newest_first_with_half_open_window(store):
    for i in range(4):
        store.create_transaction(record(f"ORD-20261019-000{i}"))
    rows = store.list_transactions(
        TransactionFilters(start_ts=START + timedelta(hours=1), end_ts=START + timedelta(hours=3))
    )
    assert [r.order_number for r in rows] == ["ORD-20261019-0002", "ORD-20261019-0001"]


def test_branch_and_search_filters(store):
    store.create_transaction(record("ORD-20261019-0001", branch_id="b1"))
    store.create_transaction(record("ORD-20261019-0002", branch_id="b2"))
    store.create_transaction(record("ORD-20261019-0003", branch_id="b3"))
    assert [r.branch_id for r in store.list_transactions(TransactionFilters(branch_id="b2"))] == ["b2"]
    assert len(store.list_transactions(TransactionFilters(branch_id=["b1", "b3"]))) == 2
    assert [r.order_number for r in store.list_transactions(TransactionFilters(order_search="ord-20261019-0003"))] == [
        "ORD-20261019-0003"
    ]


def test_factory_kinds(tmp_path):
    set_config_for_test(data_dir=str(tmp_path))
    assert isinstance(get_transaction_store("memory"), InMemoryTransactionStore)
    assert get_transaction_store("csv").path == tmp_path / "transactions.csv"
    with pytest.raises(ValueError):
        get_transaction_store("sqlite")


def test_stored_transaction_cannot_be_changed(store):
    line = CartLine(line_id="v1", menu_item_id="m1", display_name="Ekado",
                    variant_label="Small", unit_price=10000, quantity=1)
    source = TransactionRecord(
        order_number="ORD-20261019-0001",
        branch="Outlet 1",
        line_items=[line],
        subtotal=10000,
        total=10000,
        payment_method="qris",
        tendered_amount=10000,
    )
    line.quantity = 5
    stored = store.create_transaction(source)

    assert isinstance(stored.line_items, tuple)
    with pytest.raises(ValidationError):
        stored.line_items[0].quantity = 99
    with pytest.raises(ValidationError):
        stored.total = 1

    (listed,) = store.list_transactions(TransactionFilters())
    assert listed.line_items[0].quantity == 1
    assert listed.total == 10000
