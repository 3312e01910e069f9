# sales_ledger/database/repositories/products_repo.py
from dataclasses import dataclass
import sqlite3
from contextlib import contextmanager

from . import DomainError


@dataclass
class CatalogProduct:
    product_id: int | None
    name: str
    stock: float
    original_stock: float
    price: float
    sort_weight: int = 0


class ProductsRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        # Use Row for named access; we normalize to dataclasses on the way out.
        self.conn.row_factory = sqlite3.Row

    # ---------------------------- TX helper ----------------------------

    @contextmanager
    def _immediate_tx(self):
        """
        Start an IMMEDIATE transaction (write lock once first write happens),
        commit on success, rollback on error.
        """
        cur = self.conn.cursor()
        try:
            cur.execute("BEGIN IMMEDIATE")
            yield
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        finally:
            cur.close()

    # ---------------------------- Catalog ----------------------------

    _COLS = "product_id, name, stock, original_stock, price, sort_weight"

    def list_catalog(self) -> list[CatalogProduct]:
        """Every product, in display order (sort weight, then name)."""
        rows = self.conn.execute(
            f"SELECT {self._COLS} FROM products ORDER BY sort_weight, name"
        ).fetchall()
        return [CatalogProduct(**r) for r in rows]

    def create(
        self,
        name: str,
        stock: float = 0,
        original_stock: float = 0,
        price: float = 0,
        sort_weight: int = 0,
    ) -> int:
        name = (name or "").strip()
        if not name:
            raise DomainError("Product name is required.")
        try:
            with self._immediate_tx():
                cur = self.conn.execute(
                    "INSERT INTO products(name, stock, original_stock, price, sort_weight) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (name, stock, original_stock, price, sort_weight),
                )
                return int(cur.lastrowid)
        except sqlite3.IntegrityError as e:
            raise DomainError(f"A product named '{name}' already exists.") from e
