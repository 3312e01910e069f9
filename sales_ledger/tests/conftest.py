# sales_ledger/tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - pytest-qt owns QApplication (use qapp/qtbot fixtures)
# - Every test gets its own in-memory database (schema applied, no seed)
# - conn.row_factory = sqlite3.Row, PRAGMA foreign_keys=ON
# - Catalog fixtures are plain dataclasses so ledger tests need no SQL
# ---------------------------------------------------------------------

from __future__ import annotations

import os
import sqlite3

import pytest

# Run Qt headless unless the caller chose a platform explicitly.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from sales_ledger.database import get_connection
from sales_ledger.database.repositories.products_repo import CatalogProduct, ProductsRepo


@pytest.fixture(scope="session")
def app(qapp):  # alias to match code that expects an `app` fixture
    return qapp


@pytest.fixture()
def conn():
    con = get_connection(":memory:", seed=False)
    try:
        yield con
    finally:
        con.close()


class DictPriceMemory:
    """In-process PriceMemory for ledger tests."""

    def __init__(self, prices: dict | None = None):
        self.prices = dict(prices or {})
        self.writes = []

    def get(self, product_id):
        return self.prices.get(str(product_id))

    def set(self, product_id, price):
        self.writes.append((str(product_id), price))
        self.prices[str(product_id)] = price


@pytest.fixture()
def price_memory() -> DictPriceMemory:
    return DictPriceMemory()


@pytest.fixture()
def catalog() -> list[CatalogProduct]:
    return [
        CatalogProduct(product_id=1, name="Tea", stock=10, original_stock=5, price=30, sort_weight=20),
        CatalogProduct(product_id=2, name="Juice", stock=8, original_stock=0, price=35, sort_weight=10),
        CatalogProduct(product_id=3, name="Crackers", stock=0, original_stock=4, price=60, sort_weight=30),
        CatalogProduct(product_id=4, name="Sold out", stock=0, original_stock=0, price=99, sort_weight=0),
    ]


@pytest.fixture()
def ids(conn: sqlite3.Connection) -> dict:
    """Three products in the database: Juice, Tea, Crackers (display order)."""
    repo = ProductsRepo(conn)
    return {
        "tea": repo.create("Tea", stock=10, original_stock=5, price=30, sort_weight=20),
        "juice": repo.create("Juice", stock=8, original_stock=0, price=35, sort_weight=10),
        "crackers": repo.create("Crackers", stock=0, original_stock=4, price=60, sort_weight=30),
    }
