from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List

import pytest

HEADER = "Month,Investment,Impressions,Clicks,Engagement,Media Category"


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    def _write(lines: List[str], name: str = "bank.csv", header: str = HEADER) -> Path:
        path = tmp_path / name
        path.write_text("\n".join([header, *lines]) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def dashboard_raw() -> Dict[str, object]:
    return {
        "monthlyTrends": {
            "February 2024": {"total": 300.0, "banks": {"Chase Bank": 200.0, "TD Bank": 100.0}},
            "2024-01": {"total": 150.0, "banks": {"Chase Bank": 100.0, "TD Bank": 50.0}},
            "March 2024": {"total": 600.0, "banks": {"Chase Bank": 450.0, "TD Bank": 150.0}},
        },
        "mediaCategories": {"Digital": 500.0, "Television": 400.0, "Audio": 150.0},
        "bankData": {
            "Chase Bank": {"totalInvestment": 750.0, "mediaBreakdown": []},
            "TD Bank": {"totalInvestment": 300.0},
        },
        "totalInvestment": 1050.0,
    }
