"""
ledger/rows.py

One product's quantities for the current entry session, and the rules that
keep them consistent:

    0 <= picked   <= stock
    0 <= original <= original_stock
    0 <= returns  <= picked + original
    sold     = picked + original - returns
    subtotal = sold * price

Out-of-range input is clamped, never rejected.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Protocol

from ...constants import GRID_COLUMNS
from .values import FieldValue, Numeric, PendingFormula, ZERO, safe_num, to_field_value

__all__ = ["ProductRow", "PriceMemory", "apply_edit", "clamp"]

_log = logging.getLogger(__name__)


class PriceMemory(Protocol):
    """Durable per-product store for the last price an operator entered."""

    def get(self, product_id) -> Optional[float]: ...

    def set(self, product_id, price: float) -> None: ...


@dataclass
class ProductRow:
    product_id: int | str
    name: str
    stock: float
    original_stock: float
    picked: FieldValue = ZERO
    original: FieldValue = ZERO
    returns: FieldValue = ZERO
    price: FieldValue = ZERO
    sold: float = 0.0
    subtotal: float = 0.0
    sort_weight: float = 0.0

    @classmethod
    def from_catalog(cls, product, price_memory: PriceMemory | None = None) -> "ProductRow":
        """Fresh row for a catalog product; a remembered price beats the catalog one."""
        price = safe_num(product.price)
        if price_memory is not None:
            remembered = price_memory.get(product.product_id)
            if remembered is not None:
                price = safe_num(remembered)
        return cls(
            product_id=product.product_id,
            name=product.name,
            stock=safe_num(product.stock),
            original_stock=safe_num(product.original_stock),
            price=Numeric(price),
            sort_weight=safe_num(getattr(product, "sort_weight", 0)),
        )

    def value(self, field: str) -> FieldValue:
        return getattr(self, field)

    @property
    def has_pending(self) -> bool:
        return any(isinstance(getattr(self, f), PendingFormula) for f in GRID_COLUMNS)


def clamp(x: float, ceiling: float) -> float:
    """Upper bound first, then floor at zero (a negative ceiling yields 0)."""
    if x > ceiling:
        x = ceiling
    if x < 0:
        x = 0.0
    return x


def _clamped(current: FieldValue, proposed: float | None, ceiling: float) -> FieldValue:
    # A pending formula in a field the operator did not touch is left alone.
    if proposed is None:
        if isinstance(current, PendingFormula):
            return current
        proposed = safe_num(current)
    return Numeric(clamp(proposed, ceiling))


def apply_edit(
    row: ProductRow,
    field: str,
    raw_value,
    price_memory: PriceMemory | None = None,
) -> ProductRow:
    """
    Apply one edit to `row` and return the updated copy.

    A pending formula ("=...") is stored verbatim with no clamping or
    recompute. Anything else is coerced to a number, the three quantity
    fields are clamped (the edited field using its new value, the others
    their current one), and sold/subtotal are recomputed.
    """
    if field not in GRID_COLUMNS:
        raise ValueError(f"Unknown ledger field: {field!r}")

    tagged = to_field_value(raw_value)
    if isinstance(tagged, PendingFormula):
        return replace(row, **{field: tagged})

    value = safe_num(tagged)
    if field == "price" and price_memory is not None:
        try:
            price_memory.set(row.product_id, value)
        except Exception as e:
            _log.warning("Could not remember price for product %s: %s", row.product_id, e)

    picked = _clamped(row.picked, value if field == "picked" else None, row.stock)
    original = _clamped(row.original, value if field == "original" else None, row.original_stock)
    in_hand = safe_num(picked) + safe_num(original)
    returns = _clamped(row.returns, value if field == "returns" else None, in_hand)
    price = Numeric(value) if field == "price" else row.price

    sold = safe_num(picked) + safe_num(original) - safe_num(returns)
    return replace(
        row,
        picked=picked,
        original=original,
        returns=returns,
        price=price,
        sold=sold,
        subtotal=sold * safe_num(price),
    )
