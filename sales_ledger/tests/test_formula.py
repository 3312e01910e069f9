import pytest

from sales_ledger.modules.ledger.formula import evaluate


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("=2+2*3", "8"),
        ("=7/2", "3.5"),
        ("=6/2", "3"),
        ("=(1+2)*3", "9"),
        ("=-4+10", "6"),
        ("= 12 * 3 + 4", "40"),
        ("=1/3", "0.33"),
        ("=.5*4", "2"),
        ("=0.1+0.2", "0.3"),
        ("  =5-8", "-3"),
        ("=((((2))))", "2"),
        ("=--3", "3"),
    ],
)
def test_evaluate_arithmetic(raw, expected):
    assert evaluate(raw) == expected


def test_non_formula_input_passes_through():
    assert evaluate("plain") == "plain"
    assert evaluate("12") == "12"
    assert evaluate("") == ""
    assert evaluate(None) is None
    assert evaluate(7) == 7


@pytest.mark.parametrize("raw", ["=10/0", "=0/0", "=-3/(2-2)"])
def test_non_finite_result_returns_input(raw):
    assert evaluate(raw) == raw


def test_letters_are_filtered_before_evaluation():
    # nothing but spaces survives the filter
    assert evaluate("=DROP TABLE") == "=DROP TABLE"
    assert evaluate("=") == "="
    # letters vanish, the arithmetic around them still counts
    assert evaluate("=2x3") == "23"
    assert evaluate("=abs(4)") == "4"


@pytest.mark.parametrize("raw", ["=2+", "=(3", "=3)", "=2**3", "=8//2", "=1..2"])
def test_malformed_expression_returns_input(raw):
    assert evaluate(raw) == raw


def test_python_expressions_are_not_evaluated():
    raw = "=__import__('os').system('echo hi')"
    # only "()" and "." style punctuation survive, which does not parse
    assert evaluate(raw) == raw


@pytest.mark.parametrize(
    "raw, expected",
    [("=1/8", "0.13"), ("=0.625", "0.63"), ("=-1/8", "-0.13"), ("=2.5/20", "0.13"), ("=0.005", "0.01")],
)
def test_halves_round_away_from_zero(raw, expected):
    assert evaluate(raw) == expected


@pytest.mark.parametrize("raw", ["=.", "=3+.", "=(.)", "=. . .", "=2*.+1"])
def test_lone_decimal_point_returns_input(raw):
    assert evaluate(raw) == raw


@pytest.mark.parametrize(
    "raw",
    [
        "=" + "(" * 3000 + "1" + ")" * 3000,
        "=" + "-" * 3000 + "1",
        "=" + "(-" * 2000 + "1" + ")" * 2000,
    ],
)
def test_deep_nesting_returns_input(raw):
    assert evaluate(raw) == raw


def test_nesting_within_limit_still_evaluates():
    assert evaluate("=" + "(" * 40 + "7" + ")" * 40) == "7"
