"""
ledger/settlement.py

The single amount the operator settles at the end of a transaction.

Credit sales are settled by invoice value alone:

    final_total = total_row_subtotal

Cash sales are settled by what the drawer nets to, with money already spent
added back, minus what the goods sold were worth:

    final_total = (total_cash_net + expenses + line_pay + service_fee)
                  - total_row_subtotal

Pure numbers only; formatting belongs in the UI.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .cash import CashDrawer, ExpenseLedger
from .rows import ProductRow
from .values import safe_num

__all__ = ["PaymentMode", "Settlement", "total_row_subtotal", "compute_settlement"]


class PaymentMode(str, Enum):
    CASH = "CASH"
    CREDIT = "CREDIT"

    @classmethod
    def parse(cls, value) -> "PaymentMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown payment mode: {value!r}") from None


@dataclass(frozen=True)
class Settlement:
    mode: PaymentMode
    total_row_subtotal: float
    total_cash: float
    reserve: float
    total_cash_net: float
    total_expenses_plus_line_pay: float
    service_fee: float
    final_total: float

    @property
    def drawer_total(self) -> float:
        """Net drawer figure to show/save; a credit sale has no drawer."""
        return 0.0 if self.mode is PaymentMode.CREDIT else self.total_cash_net


def total_row_subtotal(rows: Iterable[ProductRow]) -> float:
    return sum(r.subtotal for r in rows)


def compute_settlement(
    rows: Iterable[ProductRow],
    drawer: CashDrawer,
    expenses: ExpenseLedger,
    mode: PaymentMode,
) -> Settlement:
    mode = PaymentMode.parse(mode)
    goods = total_row_subtotal(rows)
    total_cash = drawer.total_cash()
    net = drawer.total_cash_net(mode)
    spent = expenses.total_expenses_plus_line_pay()
    fee = expenses.service_fee

    if mode is PaymentMode.CREDIT:
        final_total = goods
    else:
        final_total = (net + spent + fee) - goods

    return Settlement(
        mode=mode,
        total_row_subtotal=goods,
        total_cash=total_cash,
        reserve=safe_num(drawer.reserve(mode)),
        total_cash_net=net,
        total_expenses_plus_line_pay=spent,
        service_fee=fee,
        final_total=final_total,
    )
