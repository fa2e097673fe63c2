"""String processing utilities for the IPEDS comps tools.

Optimization: safe_int() and first_present() run once or more per row of
every completions file scanned, so both avoid exceptions on the common path
and keep allocations minimal.
"""

from collections.abc import Mapping, Sequence

from utils.patterns import INTEGER


def safe_int(val, default: int | None = 0) -> int | None:
    """Safely convert value to int with fallback default.

    Handles:
    - None, empty strings -> default
    - ints -> unchanged; floats -> truncated toward zero
    - Strings with surrounding whitespace or thousands separators
    - Strings like "12.0" (spreadsheet exports) -> 12
    - Invalid input -> default

    Zero and negative values are returned as-is; no clamping.

    Args:
        val: Value to convert (any type)
        default: Value to return on failure (default: 0)

    Returns:
        int: Parsed value or default
    """
    if val is None or val == '':
        return default
    if isinstance(val, bool):
        return int(val)
    if isinstance(val, int):
        return val
    if isinstance(val, float):
        return int(val) if val == val else default  # NaN check

    s = str(val).strip().replace(',', '')
    if not s:
        return default
    if INTEGER.match(s):
        return int(s)
    try:
        f = float(s)
    except ValueError:
        return default
    if f != f or f in (float('inf'), float('-inf')):
        return default
    return int(f)


def first_present(row: Mapping[str, str | None], keys: Sequence[str]) -> str:
    """Return the first non-missing value for any of *keys* in *row*.

    Header spellings vary between dataset vintages (``UNITID`` vs
    ``unitid``, ``CTOTALT`` vs ``CTOTAL``); *keys* is the prioritized list
    of accepted spellings and the first key present in the row wins, even
    if its value is empty.

    Returns:
        The stripped field value, or ``""`` when no key is present.
    """
    for key in keys:
        if key in row:
            value = row[key]
            return value.strip() if value is not None else ""
    return ""


def optional_str(val) -> str | None:
    """Return ``val`` stripped, or None for missing/blank values."""
    if val is None:
        return None
    s = str(val).strip()
    return s or None
