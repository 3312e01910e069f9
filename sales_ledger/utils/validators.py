# utils/validators.py

def non_empty(text: str) -> bool:
    """
    True if `text` is not None/empty after stripping whitespace.
    """
    return bool(text and str(text).strip())


def try_parse_float(x):
    """
    Best-effort parse to float.

    Returns:
        (ok: bool, value: float|None)

    Thousands separators are tolerated ("1,200" -> 1200.0).
    """
    if isinstance(x, bool):
        return False, None
    if isinstance(x, str):
        x = x.replace(",", "").strip()
    try:
        return True, float(x)
    except (TypeError, ValueError):
        return False, None
