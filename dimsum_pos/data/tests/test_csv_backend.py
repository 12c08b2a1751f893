import json
from datetime import datetime, timedelta

import pandas as pd
import pytest

from dimsum_pos.config import set_config_for_test
from dimsum_pos.data.backends.csv_backend import (
    TRANSACTION_COLUMNS, CsvCatalogProvider, CsvTransactionStore, resolve_data_dir,
)
from dimsum_pos.data.models import ALL_CATEGORIES, CartLine, TransactionFilters, TransactionRecord
from dimsum_pos.errors import PersistenceError

START = datetime(2026, 10, 19, 9, 0)


@pytest.fixture(autouse=True)
def test_config():
    set_config_for_test(log_level="WARNING")


def cash_record(order_number, branch_id="b1"):
    return TransactionRecord(
        order_number=order_number,
        branch="Outlet 1",
        branch_id=branch_id,
        cashier_id="u1",
        line_items=[
            CartLine(line_id="v1", menu_item_id="m1", display_name="Siomay Ayam",
                     variant_label="Small", unit_price=18000, quantity=2),
            CartLine(line_id="v3", menu_item_id="m2", display_name="Hakau Udang",
                     variant_label="Regular", unit_price=25000, quantity=1),
        ],
        subtotal=61000,
        total=61000,
        payment_method="cash",
        tendered_amount=100000,
        change_amount=39000,
    )


@pytest.fixture
def store(tmp_path):
    ticks = iter(START + timedelta(hours=h) for h in range(100))
    return CsvTransactionStore(data_dir=tmp_path, clock=lambda: next(ticks))


def test_transaction_round_trip(store):
    created = store.create_transaction(cash_record("ORD-20261019-0001"))
    assert store.path.exists()

    rows = store.list_transactions(TransactionFilters())
    assert rows == [created]
    txn = rows[0]
    assert txn.created_at == START
    assert txn.line_items[0].display_name == "Siomay Ayam"
    assert txn.change_amount == 39000
    assert txn.cashier_id == "u1"


def test_list_filters_and_ordering(store):
    store.create_transaction(cash_record("ORD-20261019-0001", branch_id="b1"))
    store.create_transaction(cash_record("ORD-20261019-0002", branch_id="b2"))
    store.create_transaction(cash_record("ORD-20261019-0003", branch_id="b1"))

    newest_first = store.list_transactions(TransactionFilters())
    assert [t.order_number for t in newest_first] == [
        "ORD-20261019-0003", "ORD-20261019-0002", "ORD-20261019-0001",
    ]

    window = store.list_transactions(TransactionFilters(start_ts=START, end_ts=START + timedelta(hours=2)))
    assert [t.order_number for t in window] == ["ORD-20261019-0002", "ORD-20261019-0001"]

    assert len(store.list_transactions(TransactionFilters(branch_id="b1"))) == 2
    assert [t.order_number for t in store.list_transactions(TransactionFilters(order_search="0002"))] == [
        "ORD-20261019-0002"
    ]


def test_missing_file_lists_nothing(tmp_path):
    assert CsvTransactionStore(data_dir=tmp_path / "empty").list_transactions(TransactionFilters()) == []


def test_malformed_items_read_as_empty(tmp_path):
    """A row whose items column is not a JSON list keeps its totals and has no line items."""
    header = ",".join(TRANSACTION_COLUMNS)
    row = ",".join([
        "t1", "ORD-20261019-0009", "b1", "Outlet 1", "", '"{""oops"": 1}"',
        "10000", "0", "10000", "qris", "10000", "0", "2026-10-19T10:00:00",
    ])
    (tmp_path / "transactions.csv").write_text(header + "\n" + row + "\n", encoding="utf-8")

    rows = CsvTransactionStore(data_dir=tmp_path).list_transactions(TransactionFilters())
    assert len(rows) == 1
    assert rows[0].line_items == ()
    assert rows[0].total == 10000
    assert rows[0].cashier_id is None


def test_write_failure_raises_persistence_error(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x")
    store = CsvTransactionStore(data_dir=blocker)
    with pytest.raises(PersistenceError):
        store.create_transaction(cash_record("ORD-20261019-0001"))


def test_relative_data_dir_resolves_against_project_root(tmp_path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text("[project]\nname='x'\n")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)
    assert resolve_data_dir("sample_data") == tmp_path / "sample_data"


@pytest.fixture
def catalog_dir(tmp_path):
    (tmp_path / "categories.csv").write_text("id,name\nc2,Minuman\nc1,Dimsum\n", encoding="utf-8")
    (tmp_path / "menu_items.csv").write_text(
        "id,name,category_id,emoji,is_available\n"
        "m1,Siomay Ayam,c1,,true\n"
        "m2,Es Teh Manis,c2,,true\n"
        "m3,Bakpao Ayam,c1,,false\n"
        "m4,Hakau Udang,c1,,true\n",
        encoding="utf-8",
    )
    (tmp_path / "menu_variants.csv").write_text(
        "id,menu_item_id,size,price\n"
        "v1,m1,Small,18000\n"
        "v2,m1,Large,30000\n"
        "v3,m4,Regular,25000\n"
        "v4,m2,Regular,8000\n",
        encoding="utf-8",
    )
    return tmp_path


def test_catalog_loads_available_items_by_name(catalog_dir):
    catalog = CsvCatalogProvider(data_dir=catalog_dir).load_catalog()
    assert catalog.categories == ["Dimsum", "Minuman"]
    assert catalog.categories_with_all() == [ALL_CATEGORIES, "Dimsum", "Minuman"]
    assert [item.name for item in catalog.items] == ["Es Teh Manis", "Hakau Udang", "Siomay Ayam"]

    siomay = catalog.items[2]
    assert siomay.category == "Dimsum"
    assert siomay.emoji is None
    assert [(v.id, v.size_label, v.unit_price) for v in siomay.variants] == [
        ("v1", "Small", 18000), ("v2", "Large", 30000),
    ]
    assert all(v.parent_item_id == "m1" for v in siomay.variants)


def test_catalog_missing_files(tmp_path):
    (tmp_path / "categories.csv").write_text("id,name\n", encoding="utf-8")
    with pytest.raises(FileNotFoundError, match="menu_items.csv"):
        CsvCatalogProvider(data_dir=tmp_path).load_catalog()


def test_items_column_is_json(store):
    store.create_transaction(cash_record("ORD-20261019-0001"))
    df = pd.read_csv(store.path, dtype=str)
    items = json.loads(df.loc[0, "items"])
    assert [i["quantity"] for i in items] == [2, 1]
