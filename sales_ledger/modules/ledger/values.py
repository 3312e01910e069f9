"""
ledger/values.py

A field in the entry form is either a settled number or a formula the
operator is still typing (text starting with "="). The two are kept apart
as tagged values so arithmetic never has to sniff strings:

    Numeric(3.0)             -> settled
    PendingFormula("=2*4")   -> evaluated on commit, counts as 0 until then

`safe_num` is total: any value, tagged or raw, coerces to a finite float.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Union

from ...utils.validators import try_parse_float

__all__ = [
    "Numeric",
    "PendingFormula",
    "FieldValue",
    "ZERO",
    "is_formula_text",
    "to_field_value",
    "safe_num",
    "format_number",
    "display_value",
]


@dataclass(frozen=True)
class Numeric:
    value: float = 0.0


@dataclass(frozen=True)
class PendingFormula:
    text: str


FieldValue = Union[Numeric, PendingFormula]

ZERO = Numeric(0.0)


def is_formula_text(raw) -> bool:
    """True for a string whose trimmed form starts with '='."""
    return isinstance(raw, str) and raw.strip().startswith("=")


def safe_num(v) -> float:
    """
    Coerce anything to a finite float; never returns NaN.

    PendingFormula, unparsable text, None and non-finite numbers all give 0.0.
    """
    if isinstance(v, Numeric):
        x = v.value
    elif isinstance(v, PendingFormula) or v is None:
        return 0.0
    elif is_formula_text(v):
        return 0.0
    else:
        ok, x = try_parse_float(v)
        if not ok:
            return 0.0
    return float(x) if math.isfinite(x) else 0.0


def to_field_value(raw) -> FieldValue:
    """Tag a raw input: formula text stays verbatim, everything else is coerced."""
    if isinstance(raw, (Numeric, PendingFormula)):
        return raw
    if is_formula_text(raw):
        return PendingFormula(raw)
    return Numeric(safe_num(raw))


_CENTS = Decimal("0.01")
# wide enough for every finite float at two places
_WIDE = Context(prec=400)


def format_number(x: float) -> str:
    """
    Round to 2 decimals and print the shortest form: 3.5, 3, -0.25.

    Halves round away from zero (0.125 -> 0.13, -0.125 -> -0.13), taking the
    shortest decimal that reads back as `x` rather than its binary expansion.
    """
    d = Decimal(repr(float(x))).quantize(_CENTS, rounding=ROUND_HALF_UP, context=_WIDE)
    s = f"{d:.2f}".rstrip("0").rstrip(".")
    return "0" if s in ("-0", "") else s


def display_value(v: FieldValue, *, blank_zero: bool = False) -> str:
    """Text an editor should show for a stored value."""
    if isinstance(v, PendingFormula):
        return v.text
    x = safe_num(v)
    if blank_zero and x == 0:
        return ""
    return format_number(x)
