from pathlib import Path
import sqlite3
import sys

SQL = r"""
PRAGMA foreign_keys = ON;

/* ======================== CATALOG ======================== */

/* -------- products -------- */
/* stock          = new stock pool ("picked" draws on it)
   original_stock = returned/original pool ("original" draws on it) */
CREATE TABLE IF NOT EXISTS products (
    product_id     INTEGER PRIMARY KEY AUTOINCREMENT,
    name           TEXT NOT NULL UNIQUE,
    stock          NUMERIC NOT NULL DEFAULT 0,
    original_stock NUMERIC NOT NULL DEFAULT 0,
    price          NUMERIC NOT NULL DEFAULT 0,
    sort_weight    INTEGER NOT NULL DEFAULT 0
);

/* ======================== SALES ======================== */

CREATE TABLE IF NOT EXISTS sales (
    sale_id        TEXT PRIMARY KEY,
    date           DATE NOT NULL DEFAULT CURRENT_DATE,
    created_at     TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    sales_rep      TEXT,
    customer       TEXT NOT NULL,
    payment_mode   TEXT NOT NULL CHECK (payment_mode IN ('CASH','CREDIT')),
    total_amount   NUMERIC NOT NULL DEFAULT 0,
    total_cash     NUMERIC NOT NULL DEFAULT 0,
    reserve        NUMERIC NOT NULL DEFAULT 0,
    final_total    NUMERIC NOT NULL DEFAULT 0,
    cash_counts    TEXT NOT NULL DEFAULT '{}',   /* JSON: {denomination: count} */
    expenses       TEXT NOT NULL DEFAULT '{}'    /* JSON: {category: amount} */
);
CREATE INDEX IF NOT EXISTS idx_sales_date ON sales(date);

CREATE TABLE IF NOT EXISTS sale_items (
    item_id     INTEGER PRIMARY KEY AUTOINCREMENT,
    sale_id     TEXT NOT NULL,
    product_id  INTEGER NOT NULL,
    picked      NUMERIC NOT NULL DEFAULT 0 CHECK (picked >= 0),
    original    NUMERIC NOT NULL DEFAULT 0 CHECK (original >= 0),
    returns     NUMERIC NOT NULL DEFAULT 0 CHECK (returns >= 0),
    sold        NUMERIC NOT NULL DEFAULT 0,
    unit_price  NUMERIC NOT NULL DEFAULT 0,
    FOREIGN KEY (sale_id) REFERENCES sales(sale_id) ON DELETE CASCADE,
    FOREIGN KEY (product_id) REFERENCES products(product_id)
);
CREATE INDEX IF NOT EXISTS idx_sale_items_sale ON sale_items(sale_id);

/* ======================== SIDE STORES ======================== */

/* last price an operator typed for a product */
CREATE TABLE IF NOT EXISTS price_memory (
    product_id  TEXT PRIMARY KEY,
    price       NUMERIC NOT NULL,
    updated_at  TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
);

/* one-shot clone transfer: at most one pending snapshot */
CREATE TABLE IF NOT EXISTS clone_slot (
    id       INTEGER PRIMARY KEY CHECK (id = 1),
    payload  TEXT NOT NULL
);
"""


def init_schema(target: Path | str | sqlite3.Connection = "sales_ledger.db") -> None:
    """Apply the (idempotent) schema to a connection or a database file."""
    if isinstance(target, sqlite3.Connection):
        target.executescript(SQL)
        return
    db_path = Path(target)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(db_path) as conn:
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.executescript(SQL)
        conn.commit()


if __name__ == "__main__":
    target = sys.argv[1] if len(sys.argv) > 1 else Path(__file__).resolve().parents[1] / "data" / "sales_ledger.db"
    init_schema(target)
    print(f"✓ DB applied to {target}")
