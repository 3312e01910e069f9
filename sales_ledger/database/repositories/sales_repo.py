from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from datetime import datetime

from . import DomainError
from ...modules.ledger.merge import SaleLine, SaleRecord


def new_sale_id(conn: sqlite3.Connection, date_str: str) -> str:
    d = date_str.replace("-", "")
    prefix = f"SL{d}-"
    row = conn.execute(
        "SELECT MAX(sale_id) AS m FROM sales WHERE sale_id LIKE ?",
        (prefix + "%",),
    ).fetchone()
    last = int(row["m"].split("-")[-1]) if row and row["m"] else 0
    return f"{prefix}{last+1:04d}"


class SalesRepo:
    """
    Saved sales ("backend" for the entry form).

    Key behavior:
      - save_sale() stores one header + one item per product row in a single
        IMMEDIATE transaction; any failure rolls everything back.
      - Rows with nothing picked, taken from original stock or returned are
        not stored.
      - list_for_date() returns read-only SaleRecord objects for the merge
        and clone features, oldest first.
    """

    def __init__(self, conn: sqlite3.Connection):
        # ensure rows behave like dicts/tuples
        conn.row_factory = sqlite3.Row
        self.conn = conn

    @contextmanager
    def _immediate_tx(self):
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

    # ---------------------------------------------------------------------
    # WRITE
    # ---------------------------------------------------------------------
    def save_sale(self, payload: dict, *, now: datetime | None = None) -> str:
        customer = (payload.get("customer") or "").strip()
        if not customer:
            raise DomainError("Customer is required.")
        mode = str(payload.get("payment_mode") or "").upper()
        if mode not in ("CASH", "CREDIT"):
            raise DomainError(f"Unknown payment mode: {payload.get('payment_mode')!r}")

        now = now or datetime.now()
        date_str = now.strftime("%Y-%m-%d")
        cash = payload.get("cash") or {}
        lines = [
            ln for ln in payload.get("lines") or []
            if ln.get("picked") or ln.get("original") or ln.get("returns")
        ]

        with self._immediate_tx():
            sale_id = new_sale_id(self.conn, date_str)
            self.conn.execute(
                """
                INSERT INTO sales(sale_id, date, created_at, sales_rep, customer, payment_mode,
                                  total_amount, total_cash, reserve, final_total,
                                  cash_counts, expenses)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    sale_id, date_str, now.strftime("%Y-%m-%d %H:%M:%S"),
                    payload.get("sales_rep") or None, customer, mode,
                    float(payload.get("total_amount") or 0),
                    float(cash.get("total_cash") or 0),
                    float(cash.get("reserve") or 0),
                    float(payload.get("final_total") or 0),
                    json.dumps({str(k): v for k, v in (cash.get("counts") or {}).items()}),
                    json.dumps(payload.get("expenses") or {}),
                ),
            )
            self.conn.executemany(
                """
                INSERT INTO sale_items(sale_id, product_id, picked, original, returns, sold, unit_price)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        sale_id, ln["product_id"],
                        float(ln.get("picked") or 0), float(ln.get("original") or 0),
                        float(ln.get("returns") or 0), float(ln.get("sold") or 0),
                        float(ln.get("unit_price") or 0),
                    )
                    for ln in lines
                ],
            )
        return sale_id

    # ---------------------------------------------------------------------
    # READ
    # ---------------------------------------------------------------------
    def _record(self, header: sqlite3.Row) -> SaleRecord:
        items = self.conn.execute(
            """
            SELECT product_id,
                   CAST(picked AS REAL)     AS picked,
                   CAST(original AS REAL)   AS original,
                   CAST(returns AS REAL)    AS returns,
                   CAST(sold AS REAL)       AS sold,
                   CAST(unit_price AS REAL) AS unit_price
            FROM sale_items
            WHERE sale_id = ?
            ORDER BY item_id
            """,
            (header["sale_id"],),
        ).fetchall()
        return SaleRecord(
            sale_id=header["sale_id"],
            customer=header["customer"],
            payment_mode=header["payment_mode"],
            created_at=header["created_at"],
            lines=tuple(SaleLine(**dict(it)) for it in items),
            total_amount=float(header["total_amount"] or 0),
            reserve=float(header["reserve"] or 0),
            cash_counts={int(k): v for k, v in json.loads(header["cash_counts"] or "{}").items()},
            expenses=json.loads(header["expenses"] or "{}"),
        )

    def list_for_date(self, date_str: str) -> list[SaleRecord]:
        headers = self.conn.execute(
            "SELECT * FROM sales WHERE DATE(date) = DATE(?) ORDER BY created_at, sale_id",
            (date_str,),
        ).fetchall()
        return [self._record(h) for h in headers]
