from __future__ import annotations

import math
from typing import Optional


def _as_number(value: object) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, (int, float)):
        out = float(value)
    else:
        s = str(value).strip()
        if not s:
            return None
        try:
            out = float(s)
        except ValueError:
            return None
    if math.isnan(out) or math.isinf(out):
        return None
    return out


def format_currency(value: object) -> str:
    """Abbreviated currency: ``$1.2M``, ``$3.4K`` or ``$12``."""
    num = _as_number(value)
    if num is None:
        return "$0"
    if num >= 1_000_000:
        return f"${num / 1_000_000:.1f}M"
    if num >= 1_000:
        return f"${num / 1_000:.1f}K"
    return f"${num:.0f}"


def format_dollar_value(value: object) -> str:
    num = _as_number(value) or 0.0
    if num < 0:
        return f"-${abs(num):,.0f}"
    return f"${num:,.0f}"


def format_percentage(value: object, decimals: int = 1) -> str:
    """Format a 0-100 percentage such as ``12.345`` as ``12.3%``."""
    num = _as_number(value)
    if num is None:
        return "N/A"
    return f"{num:.{decimals}f}%"
