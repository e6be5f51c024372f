"""
Number formatting helpers shared by messages, stores and reports.
"""

from typing import Any


def format_value(value: float | int | None) -> str:
    """
    Render a metric value the way people write it: integral floats lose
    their trailing ``.0``.

    Example:
        >>> format_value(72.0)
        '72'
        >>> format_value(4.25)
        '4.25'
    """
    if value is None:
        return "N/A"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def fixed(value: float, decimals: int = 2) -> str:
    """Fixed-point string with ``decimals`` places (``fixed(50) -> '50.00'``)."""
    return f"{value:.{decimals}f}"


def to_number(value: Any) -> float | None:
    """
    Coerce a stored value into a float; ``None`` and unparsable values become ``None``.

    Stores written by older tooling keep some numbers as strings (``"12.50"``).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    try:
        return float(str(value).strip().rstrip("%"))
    except ValueError:
        return None
