from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

DEFAULT_TOP_N = 10
MAX_TOP_N = 50
ALL_PLACEHOLDERS = {"All", "All Months", "All Banks", "All Categories"}


@dataclass(frozen=True)
class DashboardFilters:
    selected_months: List[str] = field(default_factory=list)
    selected_banks: List[str] = field(default_factory=list)
    selected_categories: List[str] = field(default_factory=list)
    top_n: int = DEFAULT_TOP_N


def _as_str_list(values: Optional[Iterable[object]], *, allowed: Optional[List[str]] = None) -> List[str]:
    if not values:
        return []
    if isinstance(values, str):
        values = [values]
    out: List[str] = []
    for v in values:
        if v is None:
            continue
        s = str(v).strip()
        if not s or s in ALL_PLACEHOLDERS:
            continue
        if allowed is not None and s not in allowed:
            continue
        if s not in out:
            out.append(s)
    return out


def normalize_filters(
    raw: dict,
    *,
    available_months: Optional[List[str]] = None,
    available_banks: Optional[List[str]] = None,
    available_categories: Optional[List[str]] = None,
) -> DashboardFilters:
    # An empty selection means "everything"; "All ..." placeholders are dropped.
    selected_months = _as_str_list(raw.get("selected_months"), allowed=available_months)
    selected_banks = _as_str_list(raw.get("selected_banks"), allowed=available_banks)
    selected_categories = _as_str_list(raw.get("selected_categories"), allowed=available_categories)

    top_n = raw.get("top_n", DEFAULT_TOP_N)
    try:
        top_n = int(top_n)
    except Exception:
        top_n = DEFAULT_TOP_N
    top_n = max(1, min(MAX_TOP_N, top_n))

    return DashboardFilters(
        selected_months=selected_months,
        selected_banks=selected_banks,
        selected_categories=selected_categories,
        top_n=top_n,
    )
