from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional

import pandas as pd

from core.charts import (
    investment_by_bank_chart,
    media_distribution_chart,
    monthly_trend_chart,
    to_vega_spec,
)
from core.filters import DashboardFilters
from core.formatters import format_dollar_value


def _point(row: Optional[pd.Series], label_col: str, value_col: str) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    return {"name": str(row[label_col]), "value": float(row[value_col])}


def _pct_change(current: float, previous: float) -> Optional[float]:
    if not previous:
        return None
    return (current - previous) / previous * 100


def monthly_changes(monthly: pd.DataFrame) -> List[Dict[str, Any]]:
    """Month-over-month change in total investment, first month has no change."""
    out: List[Dict[str, Any]] = []
    previous: Optional[float] = None
    for month, total in zip(monthly["month"], monthly["total"]):
        total = float(total)
        change = None if previous is None else _pct_change(total, previous)
        out.append({"month": str(month), "total": total, "change_pct": change})
        previous = total
    return out


def bank_table(banks: pd.DataFrame) -> List[Dict[str, Any]]:
    """Ranked bank rows with a display amount such as ``$1,235``."""
    ordered = banks.sort_values("investment", ascending=False, kind="stable")
    return [
        {"rank": rank, "bank": str(bank), "investment": float(value), "investment_display": format_dollar_value(value)}
        for rank, (bank, value) in enumerate(zip(ordered["bank"], ordered["investment"]), start=1)
    ]


def compute_dashboard(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    monthly: pd.DataFrame = ctx.get("filtered_monthly", pd.DataFrame(columns=["month", "total"]))
    media: pd.DataFrame = ctx.get("filtered_media", pd.DataFrame(columns=["category", "value"]))
    banks: pd.DataFrame = ctx.get("filtered_banks", pd.DataFrame(columns=["bank", "investment"]))

    top_bank = banks.sort_values("investment", ascending=False).iloc[0] if not banks.empty else None
    top_category = media.sort_values("value", ascending=False).iloc[0] if not media.empty else None

    peak_month = None
    lowest_month = None
    investment_trend_pct = None
    if not monthly.empty:
        peak_month = monthly.loc[monthly["total"].idxmax()]
        positive = monthly[monthly["total"] > 0]
        lowest_month = positive.loc[positive["total"].idxmin()] if not positive.empty else None
        if len(monthly) >= 2:
            investment_trend_pct = _pct_change(float(monthly["total"].iloc[-1]), float(monthly["total"].iloc[0]))

    kpis = {
        "total_investment": float(ctx.get("total_investment", 0.0) or 0.0),
        "bank_count": int(ctx.get("bank_count", len(banks))),
        "month_count": int(len(monthly)),
        "top_bank": _point(top_bank, "bank", "investment"),
        "top_category": _point(top_category, "category", "value"),
        "peak_month": _point(peak_month, "month", "total"),
        "lowest_month": _point(lowest_month, "month", "total"),
        "investment_trend_pct": investment_trend_pct,
        "monthly_changes": monthly_changes(monthly),
    }

    charts = {
        "investment_by_bank": to_vega_spec(investment_by_bank_chart(banks)) if not banks.empty else None,
        "monthly_trend": to_vega_spec(monthly_trend_chart(monthly)) if not monthly.empty else None,
        "media_distribution": to_vega_spec(media_distribution_chart(media)) if not media.empty else None,
    }

    return {"filters": asdict(filters), "kpis": kpis, "charts": charts, "bank_table": bank_table(banks)}
