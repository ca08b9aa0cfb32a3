"""Numeric coercion for raw CSV fields.

Every helper here follows the same zero-fallback policy: a value that cannot be
read as a number contributes ``0`` instead of raising. Parsing is lenient about
trailing junk and reads the leading numeric prefix, so ``"12.5 USD"`` is
``12.5`` and ``"42 imps"`` is ``42``.
"""

from __future__ import annotations

import math
import re
from typing import Optional

_FLOAT_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^[+-]?\d+")


def _clean(value: object) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def to_float(value: object) -> float:
    """Parse ``value`` as a float, returning ``0.0`` when it is not numeric."""
    s = _clean(value)
    if s is None:
        return 0.0
    match = _FLOAT_PREFIX.match(s)
    if not match:
        return 0.0
    try:
        out = float(match.group(0))
    except ValueError:
        return 0.0
    if math.isnan(out) or math.isinf(out):
        return 0.0
    return out


def to_int(value: object) -> int:
    """Parse ``value`` as an int, returning ``0`` when it is not numeric."""
    s = _clean(value)
    if s is None:
        return 0
    match = _INT_PREFIX.match(s)
    if not match:
        return 0
    return int(match.group(0))
