#!/usr/bin/env python3
"""
seed_data.py

Generates a sample dimsum menu and transaction history as CSVs under a local
folder (default: the configured data_dir), in the layout read by the CSV
catalog provider and transaction store.

Entities:
- categories, menu_items, menu_variants, transactions

Run:
  dimsum-seed --days 14 --orders-per-day 40
"""

from __future__ import annotations
import argparse
import csv
import json
import os
import random
import sys
import uuid
from datetime import datetime, timedelta, date, time
from math import sin, pi
from typing import Dict, List, Optional

from dimsum_pos.checkout.order_numbers import SequentialOrderNumberGenerator
from dimsum_pos.checkout.session import QUICK_CASH_AMOUNTS
from dimsum_pos.config import get_config
from dimsum_pos.data.backends.csv_backend import TRANSACTION_COLUMNS, resolve_data_dir
from dimsum_pos.data.models import PaymentMethod

# -----------------------------
# Config & helper structures
# -----------------------------

MENU: Dict[str, List[tuple]] = {
    "Dimsum": [("Siomay Ayam", "🥟"), ("Hakau Udang", "🦐"), ("Lumpia Kulit Tahu", "🥟"), ("Bakpao Ayam", "🥟")],
    "Goreng": [("Ekado", "🍤"), ("Pangsit Goreng", "🥟"), ("Lumpia Udang", "🍤")],
    "Minuman": [("Es Teh Manis", "🥤"), ("Lemon Tea", "🍋"), ("Air Mineral", "💧")],
}

SIZES = [("Small", 1.0), ("Medium", 1.5), ("Large", 2.0)]

BRANCHES = [("b1", "Outlet 1"), ("b2", "Outlet 2")]

PAYMENT_WEIGHTS = {
    PaymentMethod.CASH: 0.55,
    PaymentMethod.QRIS: 0.30,
    PaymentMethod.DEBIT: 0.10,
    PaymentMethod.TRANSFER: 0.05,
}


# -----------------------------
# Utility functions
# -----------------------------

def ensure_dir(path: str) -> None:
    if not os.path.exists(path):
        os.makedirs(path, exist_ok=True)

def price_round(p: float) -> int:
    """Round to the nearest 500 like a menu board would."""
    return max(500, int(round(p / 500.0)) * 500)

def diurnal_multiplier(hour: float) -> float:
    """
    Lunch and dinner peaks around 12:00 and 18:00.
    Returns ~0.6 to ~1.4 multiplier.
    """
    peak1 = 0.5 * (1 + sin((hour - 12) / 24 * 2 * pi))
    peak2 = 0.5 * (1 + sin((hour - 18) / 24 * 2 * pi))
    return 0.6 + 0.8 * (0.6 * peak1 + 0.4 * peak2)

def weekend_multiplier(d: date) -> float:
    return 1.2 if d.weekday() >= 5 else 1.0  # Sat/Sun uplift


# -----------------------------
# Core generators
# -----------------------------

def gen_menu(rnd: random.Random) -> tuple[List[Dict], List[Dict], List[Dict]]:
    categories, items, variants = [], [], []
    for cat_idx, (category, entries) in enumerate(MENU.items(), start=1):
        category_id = f"c{cat_idx}"
        categories.append({"id": category_id, "name": category})
        for name, emoji in entries:
            item_id = f"m{len(items) + 1}"
            items.append({
                "id": item_id,
                "name": name,
                "category_id": category_id,
                "emoji": emoji,
                "is_available": "true",
            })
            base = rnd.uniform(8_000, 20_000)
            sizes = SIZES if category != "Minuman" else SIZES[:2]
            for size, factor in sizes:
                variants.append({
                    "id": f"v{len(variants) + 1}",
                    "menu_item_id": item_id,
                    "size": size,
                    "price": price_round(base * factor),
                })
    return categories, items, variants

def gen_transactions(
    items: List[Dict],
    variants: List[Dict],
    start_d: date,
    days: int,
    orders_per_day: int,
    seed: int,
) -> List[Dict]:
    rnd = random.Random(seed + 777)
    names = {it["id"]: it["name"] for it in items}
    numbers = SequentialOrderNumberGenerator()
    methods = list(PAYMENT_WEIGHTS)
    weights = list(PAYMENT_WEIGHTS.values())

    rows: List[Dict] = []
    for day_offset in range(days):
        day = start_d + timedelta(days=day_offset)
        n_orders = max(0, int(rnd.gauss(orders_per_day, orders_per_day * 0.2) * weekend_multiplier(day)))
        for _ in range(n_orders):
            # opening hours 10:00-21:00, weighted by meal times
            while True:
                hour = rnd.uniform(10, 21)
                if rnd.random() < diurnal_multiplier(hour) / 1.4:
                    break
            created = datetime.combine(day, time(0, 0)) + timedelta(hours=hour)

            basket = rnd.sample(variants, k=min(len(variants), 1 + int(abs(rnd.gauss(0.5, 1.0)))))
            lines = []
            for v in basket:
                qty = 1 if rnd.random() < 0.7 else rnd.randint(2, 4)
                lines.append({
                    "line_id": v["id"],
                    "menu_item_id": v["menu_item_id"],
                    "display_name": names[v["menu_item_id"]],
                    "variant_label": v["size"],
                    "unit_price": v["price"],
                    "quantity": qty,
                })
            subtotal = sum(line["unit_price"] * line["quantity"] for line in lines)
            method = rnd.choices(methods, weights=weights)[0]
            if method is PaymentMethod.CASH:
                options = [subtotal] + [a for a in QUICK_CASH_AMOUNTS if a > subtotal]
                tendered = rnd.choice(options)
            else:
                tendered = subtotal
            branch_id, branch = rnd.choice(BRANCHES)

            rows.append({
                "id": str(uuid.UUID(int=rnd.getrandbits(128))),
                "order_number": numbers.next_number(day),
                "branch_id": branch_id,
                "branch": branch,
                "cashier_id": "",
                "items": json.dumps(lines),
                "subtotal": subtotal,
                "tax": 0,
                "total": subtotal,
                "payment_method": method.value,
                "cash_amount": tendered,
                "change_amount": tendered - subtotal,
                "created_at": created.isoformat(timespec="seconds"),
            })
    return rows


# -----------------------------
# CSV writer
# -----------------------------

def write_csv(path: str, rows: List[Dict], headers: List[str]) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=headers)
        w.writeheader()
        for r in rows:
            w.writerow(r)


# -----------------------------
# Main
# -----------------------------

def main(argv: Optional[List[str]] = None) -> int:
    config = get_config()

    parser = argparse.ArgumentParser(description="Generate a sample dimsum menu and sales history to CSVs.")
    parser.add_argument("--days", type=int, default=config.default_seed_days, help="Number of days of sales history.")
    parser.add_argument("--orders-per-day", type=int, default=config.default_seed_orders_per_day)
    parser.add_argument("--start-date", type=str, default=None, help="YYYY-MM-DD (defaults to today - days + 1)")
    parser.add_argument("--output-dir", type=str, default=None, help="Defaults to the configured data_dir.")
    parser.add_argument("--seed", type=int, default=config.default_seed_value)
    parser.add_argument("--no-overwrite", action="store_true", help="Fail if CSVs already exist.")
    args = parser.parse_args(argv)

    rnd = random.Random(args.seed)
    outdir = str(resolve_data_dir(args.output_dir))
    ensure_dir(outdir)

    files = {
        "categories": os.path.join(outdir, "categories.csv"),
        "menu_items": os.path.join(outdir, "menu_items.csv"),
        "menu_variants": os.path.join(outdir, "menu_variants.csv"),
        "transactions": os.path.join(outdir, "transactions.csv"),
    }
    if args.no_overwrite:
        for p in files.values():
            if os.path.exists(p):
                print(f"Refusing to overwrite existing file: {p}", file=sys.stderr)
                return 2

    if args.start_date:
        start_d = date.fromisoformat(args.start_date)
    else:
        start_d = date.today() - timedelta(days=args.days - 1)

    categories, items, variants = gen_menu(rnd)
    transactions = gen_transactions(items, variants, start_d, args.days, args.orders_per_day, args.seed)

    write_csv(files["categories"], categories, ["id", "name"])
    write_csv(files["menu_items"], items, ["id", "name", "category_id", "emoji", "is_available"])
    write_csv(files["menu_variants"], variants, ["id", "menu_item_id", "size", "price"])
    write_csv(files["transactions"], transactions, TRANSACTION_COLUMNS)

    print(f"Generated data in {outdir}")
    print(f" categories: {len(categories)} | menu items: {len(items)} | variants: {len(variants)}")
    print(f" transactions: {len(transactions)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
