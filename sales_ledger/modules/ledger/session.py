"""
ledger/session.py

State of one entry form from load to save: the product rows, the drawer,
the expenses, the customer label and the payment mode. The form reads and
writes everything through this object; nothing here touches Qt or SQL.

Two write paths per field:
  - edit_*   : every keystroke. Formula text is stored verbatim.
  - commit_* : on blur. The formula is evaluated first, then applied.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol, Sequence

from ...constants import DENOMINATIONS, GRID_COLUMNS
from .cash import CashDrawer, ExpenseLedger
from .formula import evaluate
from .merge import SaleRecord, merge
from .navigation import FocusTarget, GridShape, route
from .rows import PriceMemory, ProductRow, apply_edit
from .settlement import PaymentMode, Settlement, compute_settlement
from .values import Numeric, PendingFormula, display_value, safe_num

__all__ = ["CloneSnapshot", "CloneSlot", "EntrySession", "snapshot_from_record"]

_log = logging.getLogger(__name__)


@dataclass
class CloneSnapshot:
    """Field values of an earlier sale, used once to pre-fill a new entry."""
    customer: str = ""
    payment_mode: str = PaymentMode.CASH.value
    reserve: Optional[float] = None
    cash_counts: dict = field(default_factory=dict)
    expenses: dict = field(default_factory=dict)
    lines: dict = field(default_factory=dict)  # product_id -> {picked, original, returns, price}

    def to_dict(self) -> dict:
        return {
            "customer": self.customer,
            "payment_mode": self.payment_mode,
            "reserve": self.reserve,
            "cash_counts": {str(k): v for k, v in self.cash_counts.items()},
            "expenses": dict(self.expenses),
            "lines": {str(k): dict(v) for k, v in self.lines.items()},
        }

    @classmethod
    def from_dict(cls, d: dict) -> "CloneSnapshot":
        return cls(
            customer=d.get("customer") or "",
            payment_mode=d.get("payment_mode") or PaymentMode.CASH.value,
            reserve=d.get("reserve"),
            cash_counts={int(k): v for k, v in (d.get("cash_counts") or {}).items()},
            expenses=dict(d.get("expenses") or {}),
            lines={str(k): dict(v) for k, v in (d.get("lines") or {}).items()},
        )


class CloneSlot(Protocol):
    """One-shot transfer slot; `take` empties it."""

    def put(self, snapshot: CloneSnapshot) -> None: ...

    def take(self) -> Optional[CloneSnapshot]: ...


def snapshot_from_record(record: SaleRecord) -> CloneSnapshot:
    return CloneSnapshot(
        customer=record.customer,
        payment_mode=PaymentMode.parse(record.payment_mode).value,
        reserve=record.reserve,
        cash_counts=dict(record.cash_counts),
        expenses=dict(record.expenses),
        lines={
            str(ln.product_id): {
                "picked": ln.picked,
                "original": ln.original,
                "returns": ln.returns,
                "price": ln.unit_price,
            }
            for ln in record.lines
        },
    )


class EntrySession:
    def __init__(
        self,
        rows: Iterable[ProductRow] = (),
        *,
        price_memory: PriceMemory | None = None,
        sales_rep: str = "",
    ):
        self.rows: list[ProductRow] = list(rows)
        self.drawer = CashDrawer()
        self.expenses = ExpenseLedger()
        self.customer = ""
        self.mode = PaymentMode.CASH
        self.sales_rep = sales_rep
        self.price_memory = price_memory

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_catalog(
        cls,
        products: Iterable,
        *,
        price_memory: PriceMemory | None = None,
        clone: CloneSnapshot | None = None,
        sales_rep: str = "",
    ) -> "EntrySession":
        """
        Rows for every product with something on hand (either pool), sorted
        by sort weight then name. A clone snapshot, if given, is laid over
        the fresh rows and clamped against today's stock.
        """
        stocked = [
            p for p in products
            if safe_num(p.stock) > 0 or safe_num(p.original_stock) > 0
        ]
        stocked.sort(key=lambda p: (safe_num(getattr(p, "sort_weight", 0)), str(p.name)))
        session = cls(
            (ProductRow.from_catalog(p, price_memory) for p in stocked),
            price_memory=price_memory,
            sales_rep=sales_rep,
        )
        if clone is not None:
            session.apply_clone(clone)
        return session

    def apply_clone(self, clone: CloneSnapshot) -> None:
        self.customer = clone.customer or ""
        self.mode = PaymentMode.parse(clone.payment_mode)
        if clone.reserve is not None:
            self.drawer.set_reserve(self.mode, clone.reserve)
        for denom, count in clone.cash_counts.items():
            if int(denom) in self.drawer.counts:
                self.drawer.set_count(int(denom), count)
        for cat, amount in clone.expenses.items():
            if cat in self.expenses.amounts:
                self.expenses.set(cat, amount)

        for i, row in enumerate(self.rows):
            values = clone.lines.get(str(row.product_id))
            if not values:
                continue
            # price first so subtotal is right; clone prices are not remembered
            for f in ("price", "picked", "original", "returns"):
                if f in values:
                    row = apply_edit(row, f, values[f])
            self.rows[i] = row

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------
    def row_index(self, product_id) -> int:
        key = str(product_id)
        for i, r in enumerate(self.rows):
            if str(r.product_id) == key:
                return i
        raise KeyError(f"No row for product {product_id!r}")

    def row(self, product_id) -> ProductRow:
        return self.rows[self.row_index(product_id)]

    def edit_row(self, product_id, field_name: str, raw) -> ProductRow:
        i = self.row_index(product_id)
        self.rows[i] = apply_edit(self.rows[i], field_name, raw, self.price_memory)
        return self.rows[i]

    def commit_row(self, product_id, field_name: str, raw) -> ProductRow:
        return self.edit_row(product_id, field_name, evaluate(raw))

    def reorder(self, product_ids: Sequence) -> None:
        """Drag-reorder by identity; ids not mentioned keep their order at the end."""
        by_id = {str(r.product_id): r for r in self.rows}
        ordered = []
        for pid in product_ids:
            r = by_id.pop(str(pid), None)
            if r is not None:
                ordered.append(r)
        ordered.extend(r for r in self.rows if str(r.product_id) in by_id)
        self.rows = ordered

    # ------------------------------------------------------------------
    # Drawer / expenses (read-only while on credit)
    # ------------------------------------------------------------------
    @property
    def sidebar_editable(self) -> bool:
        return self.mode is PaymentMode.CASH

    def _sidebar_locked(self, what: str) -> bool:
        if not self.sidebar_editable:
            _log.debug("Ignoring %s edit while payment mode is %s", what, self.mode.value)
            return True
        return False

    def edit_cash(self, denomination: int, raw):
        if self._sidebar_locked("cash"):
            return self.drawer.counts[denomination]
        return self.drawer.set_count(denomination, raw)

    def commit_cash(self, denomination: int, raw):
        return self.edit_cash(denomination, evaluate(raw))

    @property
    def reserve(self):
        return self.drawer.reserve(self.mode)

    def edit_reserve(self, raw):
        if self._sidebar_locked("reserve"):
            return self.reserve
        return self.drawer.set_reserve(self.mode, raw)

    def commit_reserve(self, raw):
        return self.edit_reserve(evaluate(raw))

    def edit_expense(self, category: str, raw):
        if self._sidebar_locked("expense"):
            return self.expenses.amounts[category]
        return self.expenses.set(category, raw)

    def commit_expense(self, category: str, raw):
        return self.edit_expense(category, evaluate(raw))

    def set_mode(self, mode) -> None:
        self.mode = PaymentMode.parse(mode)

    def commit_pending(self) -> None:
        """Evaluate every formula still pending; failures stay pending."""
        for i, row in enumerate(self.rows):
            for f in GRID_COLUMNS:
                v = row.value(f)
                if isinstance(v, PendingFormula):
                    row = apply_edit(row, f, evaluate(v.text), self.price_memory)
            self.rows[i] = row
        for d, c in list(self.drawer.counts.items()):
            if isinstance(c, PendingFormula):
                self.drawer.commit_count(d, c.text)
        for mode, r in list(self.drawer.reserves.items()):
            if isinstance(r, PendingFormula):
                self.drawer.set_reserve(mode, evaluate(r.text))
        for cat, a in list(self.expenses.amounts.items()):
            if isinstance(a, PendingFormula):
                self.expenses.commit(cat, a.text)

    # ------------------------------------------------------------------
    # Derived
    # ------------------------------------------------------------------
    def settlement(self) -> Settlement:
        return compute_settlement(self.rows, self.drawer, self.expenses, self.mode)

    def grid_shape(self) -> GridShape:
        return GridShape(row_count=len(self.rows), sidebar_enabled=self.sidebar_editable)

    def route(self, current: FocusTarget, key) -> Optional[FocusTarget]:
        return route(current, key, self.grid_shape())

    # ------------------------------------------------------------------
    # Payloads for the outside world
    # ------------------------------------------------------------------
    def sale_payload(self) -> dict:
        s = self.settlement()
        return {
            "sales_rep": self.sales_rep,
            "customer": self.customer.strip(),
            "payment_mode": self.mode.value,
            "lines": [
                {
                    "product_id": r.product_id,
                    "picked": safe_num(r.picked),
                    "original": safe_num(r.original),
                    "returns": safe_num(r.returns),
                    "sold": r.sold,
                    "unit_price": safe_num(r.price),
                }
                for r in self.rows
            ],
            "cash": {
                "counts": {d: safe_num(self.drawer.counts[d]) for d in DENOMINATIONS},
                "total_cash": s.drawer_total,
                "reserve": s.reserve,
            },
            "expenses": self.expenses.as_numbers(),
            "total_amount": s.total_row_subtotal,
            "final_total": s.final_total,
        }

    def print_payload(self, template_id: str, records: Sequence[SaleRecord] | None = None) -> dict:
        """
        Flat row list for the print renderer. With `records` the rows are the
        merged manifest of those sales instead of the live table.
        """
        s = self.settlement()
        if records is None:
            rows = [
                {
                    "name": r.name,
                    "stock": format_qty(r.stock),
                    "original_stock": format_qty(r.original_stock),
                    "picked": display_value(r.picked, blank_zero=True),
                    "original": display_value(r.original, blank_zero=True),
                    "returns": display_value(r.returns, blank_zero=True),
                    "sold": format_qty(r.sold),
                    "price": display_value(r.price),
                    "subtotal": format_qty(r.subtotal),
                }
                for r in self.rows
            ]
            title = self.customer
        else:
            rows = [
                {
                    "name": m.name,
                    "stock": "",
                    "original_stock": "",
                    "picked": m.picked,
                    "original": m.original,
                    "returns": m.returns,
                    "sold": m.sold,
                    "price": m.price,
                    "subtotal": m.subtotal,
                }
                for m in merge(self.rows, records)
            ]
            title = " / ".join(r.customer for r in records if r.customer)
        return {
            "template_id": template_id,
            "title": title,
            "sales_rep": self.sales_rep,
            "merged": records is not None,
            "record_count": len(records) if records is not None else 0,
            "rows": rows,
            "summary": {
                "payment_mode": self.mode.value,
                "total_sales": s.total_row_subtotal,
                "total_cash": s.total_cash,
                "reserve": s.reserve,
                "total_cash_net": s.drawer_total,
                "expenses": self.expenses.as_numbers(),
                "final_total": s.final_total,
            },
        }


def format_qty(x) -> str:
    return display_value(Numeric(safe_num(x)))
