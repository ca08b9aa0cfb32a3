from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import asdict
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd

from core.filters import DashboardFilters, normalize_filters
from core.schemas import DashboardPayload


logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).resolve().parents[1]
DATA_DIR = Path(os.environ.get("MEDIA_DATA_DIR", str(ROOT_DIR / "public")))
RAW_DATA_DIR = DATA_DIR / "data"
PROCESSED_DIR = DATA_DIR / "processed"

BANK_NAME = os.environ.get("MEDIA_BANK_NAME", "Chase Bank")
BANK_INPUT_FILE = RAW_DATA_DIR / "chase-bank-benchmark-v3.csv"
BANK_OUTPUT_FILE = PROCESSED_DIR / "chase-bank-performance.json"
DASHBOARD_DATA_FILE = PROCESSED_DIR / "dashboard-data.json"

MEDIA_CATEGORIES: Tuple[str, ...] = ("Digital", "Television", "Audio", "Print", "Outdoor")
CATEGORY_COLORS: Tuple[str, ...] = ("#0088FE", "#00C49F", "#FFBB28", "#FF8042", "#8884D8")

MONTH_ORDER = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

_ISO_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def normalize_month(label: object) -> Optional[str]:
    """Normalize ``"January 2024"`` or ``"2024-01"`` to ``"2024-01"``."""
    if label is None:
        return None
    s = str(label).strip()
    match = _ISO_MONTH_RE.match(s)
    if match:
        month = int(match.group(2))
        return s if 1 <= month <= 12 else None
    parts = s.split()
    if len(parts) != 2:
        return None
    name, year = parts[0].capitalize(), parts[1]
    if name not in MONTH_ORDER or not year.isdigit() or len(year) != 4:
        return None
    return f"{year}-{MONTH_ORDER.index(name) + 1:02d}"


def month_sort_key(label: str) -> Tuple[int, str]:
    normalized = normalize_month(label)
    if normalized is None:
        return (1, str(label))
    return (0, normalized)


def sort_months(labels: List[str]) -> List[str]:
    return sorted(labels, key=month_sort_key)


def get_source_files() -> List[Path]:
    return [p for p in (DASHBOARD_DATA_FILE, BANK_OUTPUT_FILE) if p.exists()]


def file_signature(files: List[Path]) -> Tuple[Tuple[str, float], ...]:
    return tuple((str(f), f.stat().st_mtime) for f in files)


def load_payload(path: Path | str, *, bank_name: str = BANK_NAME) -> DashboardPayload:
    """Read a dashboard payload, or a flat aggregate adapted into one."""
    with Path(path).open("r", encoding="utf-8") as fh:
        raw = json.load(fh)
    if isinstance(raw, dict) and "mediaDistribution" in raw:
        logger.info("Adapting flat aggregate %s for bank %s", path, bank_name)
        return DashboardPayload.from_aggregate(raw, bank_name)
    return DashboardPayload.model_validate(raw)


def payload_frames(payload: DashboardPayload) -> Dict[str, pd.DataFrame]:
    months = sort_months(list(payload.monthlyTrends.keys()))
    monthly = pd.DataFrame(
        [{"month": m, "total": float(payload.monthlyTrends[m].total)} for m in months],
        columns=["month", "total"],
    )
    monthly_banks = pd.DataFrame(
        [
            {"month": m, "bank": bank, "investment": float(value)}
            for m in months
            for bank, value in payload.monthlyTrends[m].banks.items()
        ],
        columns=["month", "bank", "investment"],
    )
    media = pd.DataFrame(
        [{"category": c, "value": float(v)} for c, v in payload.mediaCategories.items()],
        columns=["category", "value"],
    )
    banks = pd.DataFrame(
        [{"bank": b, "investment": float(s.totalInvestment)} for b, s in payload.bankData.items()],
        columns=["bank", "investment"],
    )
    return {"monthly": monthly, "monthly_banks": monthly_banks, "media": media, "bank_totals": banks}


@lru_cache(maxsize=4)
def _load_dashboard_data_cached(files_sig: Tuple[Tuple[str, float], ...]) -> Dict[str, object]:
    path = Path(files_sig[0][0])
    payload = load_payload(path)
    frames = payload_frames(payload)
    return {
        "files": [Path(name) for name, _ in files_sig],
        "source": path,
        "payload": payload,
        "months": frames["monthly"]["month"].tolist(),
        "banks": sorted(frames["bank_totals"]["bank"].tolist()),
        "categories": frames["media"]["category"].tolist(),
        **frames,
    }


def load_dashboard_data() -> Dict[str, object]:
    files = get_source_files()
    if not files:
        return {"files": [], "months": [], "banks": [], "categories": []}
    return _load_dashboard_data_cached(file_signature(files))


def prepare_context(filters: dict | DashboardFilters, data_ctx: Dict[str, object]) -> Dict[str, object]:
    if not isinstance(filters, DashboardFilters):
        filters = normalize_filters(
            filters,
            available_months=data_ctx.get("months", []),
            available_banks=data_ctx.get("banks", []),
            available_categories=data_ctx.get("categories", []),
        )

    monthly: pd.DataFrame = data_ctx.get("monthly", pd.DataFrame(columns=["month", "total"])).copy()
    monthly_banks: pd.DataFrame = data_ctx.get(
        "monthly_banks", pd.DataFrame(columns=["month", "bank", "investment"])
    ).copy()
    media: pd.DataFrame = data_ctx.get("media", pd.DataFrame(columns=["category", "value"])).copy()
    banks: pd.DataFrame = data_ctx.get("bank_totals", pd.DataFrame(columns=["bank", "investment"])).copy()

    if filters.selected_months:
        monthly = monthly[monthly["month"].isin(filters.selected_months)]
        monthly_banks = monthly_banks[monthly_banks["month"].isin(filters.selected_months)]

    if filters.selected_banks:
        has_breakdown = not monthly_banks.empty
        banks = banks[banks["bank"].isin(filters.selected_banks)]
        monthly_banks = monthly_banks[monthly_banks["bank"].isin(filters.selected_banks)]
        # Month totals only reflect the selected banks when the breakdown is known.
        if has_breakdown:
            per_month = monthly_banks.groupby("month", sort=False)["investment"].sum()
            monthly = monthly.assign(total=monthly["month"].map(per_month).fillna(0.0))

    if filters.selected_categories:
        media = media[media["category"].isin(filters.selected_categories)]

    total_investment = _payload_total(data_ctx, filters, banks)
    bank_count = int(len(banks))
    banks = banks.sort_values("investment", ascending=False, kind="stable").head(filters.top_n)

    return {
        "filters": asdict(filters),
        "filtered_monthly": monthly.reset_index(drop=True),
        "filtered_monthly_banks": monthly_banks.reset_index(drop=True),
        "filtered_media": media.reset_index(drop=True),
        "filtered_banks": banks.reset_index(drop=True),
        "total_investment": total_investment,
        "bank_count": bank_count,
    }


def _payload_total(data_ctx: Dict[str, object], filters: DashboardFilters, banks: pd.DataFrame) -> float:
    payload: Optional[DashboardPayload] = data_ctx.get("payload")  # type: ignore[assignment]
    if filters.selected_banks or payload is None or payload.totalInvestment is None:
        return float(banks["investment"].sum()) if not banks.empty else 0.0
    return float(payload.totalInvestment)
