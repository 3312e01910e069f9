"""
ledger/formula.py

Inline arithmetic for numeric fields. An operator may type "=12*3+4" into a
quantity or price box; on commit the text is replaced by "40".

Only digits, + - * /, parentheses, the decimal point and spaces survive the
input filter, so nothing but plain arithmetic can be expressed. Anything that
fails to parse or evaluates to a non-finite number is handed back untouched.
"""
from __future__ import annotations

import logging
import math
import re

from .values import format_number, is_formula_text

__all__ = ["evaluate", "FormulaError"]

_log = logging.getLogger(__name__)

_DISALLOWED = re.compile(r"[^0-9+\-*/(). ]")
_NUMBER = r"\d+\.?\d*|\.\d+"
_TOKEN = re.compile(rf"\s*(?:({_NUMBER})|(.))")
_NUMBER_RE = re.compile(_NUMBER)

# parentheses and unary signs nested deeper than this do not parse
_MAX_DEPTH = 64


class FormulaError(ValueError):
    """Raised internally when the filtered expression does not parse."""


def _tokenize(expr: str) -> list[str]:
    tokens = []
    pos = 0
    expr = expr.rstrip()
    while pos < len(expr):
        m = _TOKEN.match(expr, pos)
        if m is None:
            raise FormulaError(f"bad input at {pos}")
        tokens.append(m.group(1) or m.group(2))
        pos = m.end()
    return tokens


def _divide(a: float, b: float) -> float:
    # Non-finite results are rejected by the caller, not raised here.
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


class _Parser:
    """
    expr   := term (('+' | '-') term)*
    term   := unary (('*' | '/') unary)*
    unary  := ('+' | '-') unary | atom
    atom   := NUMBER | '(' expr ')'
    """

    def __init__(self, tokens: list[str]):
        self.tokens = tokens
        self.i = 0
        self.depth = 0

    def _descend(self):
        self.depth += 1
        if self.depth > _MAX_DEPTH:
            raise FormulaError("expression nested too deeply")

    def _peek(self):
        return self.tokens[self.i] if self.i < len(self.tokens) else None

    def _next(self):
        tok = self._peek()
        if tok is None:
            raise FormulaError("unexpected end of expression")
        self.i += 1
        return tok

    def parse(self) -> float:
        value = self._expr()
        if self._peek() is not None:
            raise FormulaError(f"unexpected token {self._peek()!r}")
        return value

    def _expr(self) -> float:
        value = self._term()
        while self._peek() in ("+", "-"):
            op = self._next()
            rhs = self._term()
            value = value + rhs if op == "+" else value - rhs
        return value

    def _term(self) -> float:
        value = self._unary()
        while self._peek() in ("*", "/"):
            op = self._next()
            rhs = self._unary()
            value = value * rhs if op == "*" else _divide(value, rhs)
        return value

    def _unary(self) -> float:
        if self._peek() in ("+", "-"):
            op = self._next()
            self._descend()
            value = self._unary()
            self.depth -= 1
            return -value if op == "-" else value
        return self._atom()

    def _atom(self) -> float:
        tok = self._next()
        if tok == "(":
            self._descend()
            value = self._expr()
            if self._next() != ")":
                raise FormulaError("missing ')'")
            self.depth -= 1
            return value
        if _NUMBER_RE.fullmatch(tok):
            return float(tok)
        raise FormulaError(f"unexpected token {tok!r}")


def evaluate(raw):
    """
    Evaluate a "=..." field value and return its canonical number string.

    Non-formula input is returned as-is, so this can run on every blur.
    Failures return `raw` unchanged; nothing is raised to the caller.
    """
    if not is_formula_text(raw):
        return raw

    expression = _DISALLOWED.sub("", raw.strip()[1:])
    if not expression.strip():
        return raw

    try:
        result = _Parser(_tokenize(expression)).parse()
    except (FormulaError, ArithmeticError, RecursionError) as e:
        _log.debug("Formula evaluation failed for %r: %s", raw, e)
        return raw

    if not math.isfinite(result):
        _log.debug("Formula %r produced a non-finite result", raw)
        return raw
    return format_number(result)
