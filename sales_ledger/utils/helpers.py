# utils/helpers.py
from datetime import date
import logging
from typing import Union, Optional

NumberLike = Union[float, int, str]

_log = logging.getLogger(__name__)


def today_str() -> str:
    """Return today's date as ISO string (YYYY-MM-DD)."""
    return date.today().isoformat()


def fmt_money(
    v: NumberLike,
    places: int = 2,
    *,
    trim: bool = True,
    sentinel: Optional[str] = None,
) -> str:
    """
    Format a number as money with thousands separators.

    Args:
        v: Value to format; parsed with float(v).
        places: Maximum number of decimal places (default: 2).
        trim: Drop trailing fractional zeros ("1,250.50" -> "1,250.5",
            "300.00" -> "300"). Drawer totals are mostly whole units.
        sentinel: If not None and parsing fails, return this string
            instead of str(v).
    """
    try:
        x = float(v)
    except (TypeError, ValueError) as e:
        # Log at debug level to aid troubleshooting without spamming user logs.
        _log.debug("fmt_money: failed to parse %r as float: %s", v, e)
        return str(sentinel) if sentinel is not None else str(v)
    s = f"{x:,.{places}f}"
    if trim and "." in s:
        s = s.rstrip("0").rstrip(".")
    if s == "-0":
        s = "0"
    return s
