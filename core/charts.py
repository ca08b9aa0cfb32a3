from __future__ import annotations

from typing import Any, Dict, List

import altair as alt
import pandas as pd

from core.data import CATEGORY_COLORS

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def investment_by_bank_chart(banks: pd.DataFrame, height: int = 300) -> alt.Chart:
    order: List[str] = banks.sort_values("investment", ascending=False)["bank"].tolist()
    return (
        alt.Chart(banks)
        .mark_bar(color="#8884d8")
        .encode(
            x=alt.X("bank:N", title="Bank", sort=order),
            y=alt.Y("investment:Q", title="Investment", axis=alt.Axis(format="$~s")),
            tooltip=["bank", alt.Tooltip("investment:Q", format="$,.0f")],
        )
        .properties(height=height)
    )


def monthly_trend_chart(monthly: pd.DataFrame, height: int = 300) -> alt.Chart:
    return (
        alt.Chart(monthly)
        .mark_line(point=True, color="#8884d8")
        .encode(
            x=alt.X("month:O", title="Month", sort=monthly["month"].tolist()),
            y=alt.Y("total:Q", title="Investment", axis=alt.Axis(format="$~s")),
            tooltip=["month", alt.Tooltip("total:Q", format="$,.0f")],
        )
        .properties(height=height)
    )


def media_distribution_chart(media: pd.DataFrame, height: int = 300) -> alt.Chart:
    categories = media["category"].tolist()
    palette = [CATEGORY_COLORS[i % len(CATEGORY_COLORS)] for i in range(len(categories))]
    return (
        alt.Chart(media)
        .mark_arc(outerRadius=110)
        .encode(
            theta=alt.Theta("value:Q", stack=True),
            color=alt.Color(
                "category:N",
                title="Media Category",
                sort=categories,
                scale=alt.Scale(domain=categories, range=palette),
            ),
            tooltip=["category", alt.Tooltip("value:Q", format=",.2f")],
        )
        .properties(height=height)
    )
