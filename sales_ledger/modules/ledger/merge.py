"""
ledger/merge.py

Combine several saved sales of the same day into one printable manifest.

The output follows the live table: one row per base row, same order, even
for products nobody sold. Each quantity cell lists the non-zero values of
the contributing records in record order ("3 / 4"). The merged sheet is a
manifest only: stock and subtotal stay blank.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from ...constants import MERGE_SEPARATOR
from .rows import ProductRow
from .values import Numeric, format_number, safe_num

__all__ = ["SaleLine", "SaleRecord", "MergedLedgerRow", "merge", "join_nonzero"]

QUANTITY_FIELDS = ("picked", "original", "returns", "sold")


@dataclass(frozen=True)
class SaleLine:
    product_id: int | str
    picked: float = 0.0
    original: float = 0.0
    returns: float = 0.0
    sold: float = 0.0
    unit_price: float = 0.0


@dataclass(frozen=True)
class SaleRecord:
    sale_id: str
    customer: str
    payment_mode: str
    created_at: str
    lines: tuple[SaleLine, ...] = ()
    total_amount: float = 0.0
    # drawer/expense breakdown, only needed to clone a record
    reserve: float = 0.0
    cash_counts: dict = field(default_factory=dict)
    expenses: dict = field(default_factory=dict)

    def line_for(self, product_id) -> Optional[SaleLine]:
        key = str(product_id)
        for line in self.lines:
            if str(line.product_id) == key:
                return line
        return None


@dataclass(frozen=True)
class MergedLedgerRow:
    product_id: int | str
    name: str
    picked: str = ""
    original: str = ""
    returns: str = ""
    sold: str = ""
    price: str = ""
    stock: float = 0
    original_stock: float = 0
    subtotal: str = ""


def join_nonzero(values: Iterable, separator: str = MERGE_SEPARATOR) -> str:
    """'3 / 4' from [3, 0, '', 4]; zeros and blanks are dropped."""
    return separator.join(format_number(safe_num(v)) for v in values if safe_num(v) != 0)


def _base_price(row: ProductRow) -> str:
    # a formula still being typed has no price to show
    return format_number(row.price.value) if isinstance(row.price, Numeric) else ""


def merge(base_rows: Sequence[ProductRow], records: Sequence[SaleRecord]) -> list[MergedLedgerRow]:
    """
    One merged row per base row. Price is taken from the first record that
    carries the product, else from the live row.
    """
    merged = []
    for row in base_rows:
        lines = [ln for ln in (rec.line_for(row.product_id) for rec in records) if ln is not None]
        cells = {f: join_nonzero(getattr(ln, f) for ln in lines) for f in QUANTITY_FIELDS}
        price = format_number(safe_num(lines[0].unit_price)) if lines else _base_price(row)
        merged.append(MergedLedgerRow(product_id=row.product_id, name=row.name, price=price, **cells))
    return merged
