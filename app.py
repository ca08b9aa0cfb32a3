import pandas as pd
import streamlit as st
from contextlib import contextmanager
from typing import Dict, List, Optional

from pydantic import ValidationError

from core import data as dc
from core.filters import normalize_filters
from core.formatters import format_currency, format_percentage
from core.metrics_dashboard import compute_dashboard


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-header {display: flex;justify-content: space-between;align-items: center;margin-bottom: 8px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(
        f"""
        <div class="card">
          <div class="card-header">
            <div class="card-title">{title}</div>
          </div>
        """,
        unsafe_allow_html=True,
    )
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(selected_months: List[str], selected_banks: List[str], selected_categories: List[str]) -> str:
    month_chip = f"Months: {selected_months[0]}–{selected_months[-1]}" if selected_months else "Months: All"
    bank_chip = f"Banks: {', '.join(selected_banks)}" if selected_banks else "Banks: All"
    cat_chip = f"Media: {', '.join(selected_categories)}" if selected_categories else "Media: All"
    return "".join([f"<span class='chip'>{txt}</span>" for txt in [month_chip, bank_chip, cat_chip]])


def render_page_header(title: str, breadcrumb: str, filter_summary_html: str, export_df: Optional[pd.DataFrame] = None, export_name: str = "export.csv"):
    inject_base_styles()
    c1, c2 = st.columns([8, 2])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        if export_df is not None and not export_df.empty:
            st.download_button(
                "Export CSV",
                data=export_df.to_csv(index=False).encode("utf-8"),
                file_name=export_name,
                mime="text/csv",
            )
    st.markdown(f"<div class='chip-row'>{filter_summary_html}</div>", unsafe_allow_html=True)


def render_kpi_tiles(kpis: Dict[str, object]):
    cols = st.columns(4)
    cols[0].metric("Total Investment", format_currency(kpis["total_investment"]))
    top_bank = kpis.get("top_bank") or {}
    cols[1].metric("Top Bank", top_bank.get("name", "N/A"), format_currency(top_bank.get("value")) if top_bank else None)
    peak = kpis.get("peak_month") or {}
    cols[2].metric("Peak Month", peak.get("name", "N/A"), format_currency(peak.get("value")) if peak else None)
    trend = kpis.get("investment_trend_pct")
    cols[3].metric("Investment Trend", format_percentage(trend) if trend is not None else "N/A")


# ---------- UI setup ----------
st.set_page_config(page_title="Bank Media Investment Dashboard", layout="wide")
inject_base_styles()
st.title("Bank Media Investment Dashboard")
st.caption("Media-spend benchmark: investment by bank, monthly trend and media mix.")

try:
    data_ctx = dc.load_dashboard_data()
except (OSError, ValueError, ValidationError) as exc:
    st.error(f"Could not read dashboard data: {exc}")
    st.stop()

if not data_ctx.get("files"):
    st.error(f"No processed data found. Run `python -m core.aggregator` or place {dc.DASHBOARD_DATA_FILE.name} in {dc.PROCESSED_DIR}.")
    st.stop()

months = data_ctx.get("months", [])
banks = data_ctx.get("banks", [])
categories = data_ctx.get("categories", [])

# ----- Sidebar: filters -----
with st.sidebar:
    st.markdown("### Filters")
    selected_months = st.multiselect("Months", options=months, default=[])
    selected_banks = st.multiselect("Banks", options=banks, default=[])
    selected_categories = st.multiselect("Media Category", options=categories, default=[])
    st.markdown("---")
    with st.expander("Advanced settings", expanded=False):
        top_n = st.slider("Top N banks", min_value=1, max_value=50, value=10, step=1)

filters = normalize_filters(
    {
        "selected_months": selected_months,
        "selected_banks": selected_banks,
        "selected_categories": selected_categories,
        "top_n": top_n,
    },
    available_months=months,
    available_banks=banks,
    available_categories=categories,
)
ctx = dc.prepare_context(filters, data_ctx)
payload = compute_dashboard(filters, ctx)
charts = payload["charts"]

render_page_header(
    "Summary",
    f"Home / Summary / {data_ctx['source'].name}",
    format_filter_summary(filters.selected_months, filters.selected_banks, filters.selected_categories),
    export_df=ctx["filtered_banks"],
    export_name="bank_investment.csv",
)

with card("Key Metrics"):
    render_kpi_tiles(payload["kpis"])

with card("Total Investment by Bank"):
    if charts["investment_by_bank"] is None:
        st.info("No bank data for the current filters.")
    else:
        st.vega_lite_chart(charts["investment_by_bank"], use_container_width=True)
        with st.expander("Bank table", expanded=False):
            st.dataframe(
                pd.DataFrame(payload["bank_table"], columns=["rank", "bank", "investment_display"]).rename(
                    columns={"rank": "Rank", "bank": "Bank", "investment_display": "Total Investment"}
                ),
                hide_index=True,
                use_container_width=True,
            )

cols = st.columns(2)
with cols[0]:
    with card("Monthly Trends"):
        if charts["monthly_trend"] is None:
            st.info("No monthly data in this payload.")
        else:
            st.vega_lite_chart(charts["monthly_trend"], use_container_width=True)
with cols[1]:
    with card("Distribution by Media Type"):
        if charts["media_distribution"] is None:
            st.info("No media category data for the current filters.")
        else:
            st.vega_lite_chart(charts["media_distribution"], use_container_width=True)

st.caption("Re-run the aggregator to refresh processed data; the dashboard reloads when the files change.")
