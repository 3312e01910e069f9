# sales_ledger/database/repositories/price_memory_repo.py
import sqlite3


class PriceMemoryRepo:
    """
    Remembers the last unit price typed for each product so the next entry
    session starts from it. Keys are stored as text so catalog ids of any
    type round-trip.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    def get(self, product_id) -> float | None:
        r = self.conn.execute(
            "SELECT CAST(price AS REAL) AS price FROM price_memory WHERE product_id=?",
            (str(product_id),),
        ).fetchone()
        return float(r["price"]) if r else None

    def set(self, product_id, price: float) -> None:
        self.conn.execute(
            """
            INSERT INTO price_memory(product_id, price, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(product_id) DO UPDATE SET
                price=excluded.price,
                updated_at=excluded.updated_at
            """,
            (str(product_id), float(price)),
        )
        self.conn.commit()
