"""
ledger/cash.py

Cash drawer count and the expense panel.

    total_cash     = sum(denomination * count)
    total_cash_net = total_cash - reserve

The reserve (float held back in the drawer) is kept per payment mode, so
switching to credit and back restores the cash reserve untouched.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from ...constants import (
    DEFAULT_CASH_RESERVE,
    DEFAULT_CREDIT_RESERVE,
    DENOMINATIONS,
    EXPENSE_CATEGORIES,
    LINE_PAY,
    SERVICE_FEE,
)
from .formula import evaluate
from .values import FieldValue, Numeric, ZERO, safe_num, to_field_value

__all__ = ["CashDrawer", "ExpenseLedger", "EXPENSE_FIELDS"]

EXPENSE_FIELDS = EXPENSE_CATEGORIES + (LINE_PAY, SERVICE_FEE)


def _mode_key(mode) -> str:
    return str(getattr(mode, "value", mode)).upper()


def _default_counts() -> dict[int, FieldValue]:
    return {d: ZERO for d in DENOMINATIONS}


def _default_reserves() -> dict[str, FieldValue]:
    return {"CASH": Numeric(DEFAULT_CASH_RESERVE), "CREDIT": Numeric(DEFAULT_CREDIT_RESERVE)}


@dataclass
class CashDrawer:
    counts: dict[int, FieldValue] = field(default_factory=_default_counts)
    reserves: dict[str, FieldValue] = field(default_factory=_default_reserves)

    def set_count(self, denomination: int, raw) -> FieldValue:
        if denomination not in self.counts:
            raise KeyError(f"Unknown denomination: {denomination!r}")
        self.counts[denomination] = to_field_value(raw)
        return self.counts[denomination]

    def commit_count(self, denomination: int, raw) -> FieldValue:
        return self.set_count(denomination, evaluate(raw))

    def reserve(self, mode: str) -> FieldValue:
        return self.reserves.get(_mode_key(mode), ZERO)

    def set_reserve(self, mode: str, raw) -> FieldValue:
        self.reserves[_mode_key(mode)] = to_field_value(raw)
        return self.reserves[_mode_key(mode)]

    def total_cash(self) -> float:
        return sum(d * safe_num(c) for d, c in self.counts.items())

    def total_cash_net(self, mode: str) -> float:
        return self.total_cash() - safe_num(self.reserve(mode))


@dataclass
class ExpenseLedger:
    amounts: dict[str, FieldValue] = field(
        default_factory=lambda: {k: ZERO for k in EXPENSE_FIELDS}
    )

    def set(self, category: str, raw) -> FieldValue:
        if category not in self.amounts:
            raise KeyError(f"Unknown expense category: {category!r}")
        self.amounts[category] = to_field_value(raw)
        return self.amounts[category]

    def commit(self, category: str, raw) -> FieldValue:
        return self.set(category, evaluate(raw))

    def amount(self, category: str) -> float:
        return safe_num(self.amounts.get(category))

    def total_expenses_plus_line_pay(self) -> float:
        # service fee is deducted on its own, never summed here
        return sum(self.amount(k) for k in EXPENSE_CATEGORIES) + self.amount(LINE_PAY)

    @property
    def service_fee(self) -> float:
        return self.amount(SERVICE_FEE)

    def as_numbers(self) -> dict[str, float]:
        return {k: self.amount(k) for k in EXPENSE_FIELDS}
