from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from core import data as dc
from core.data import (
    load_payload,
    month_sort_key,
    normalize_month,
    payload_frames,
    prepare_context,
    sort_months,
)
from core.filters import DashboardFilters
from core.schemas import DashboardPayload


@pytest.mark.parametrize(
    "label, expected",
    [
        ("January 2024", "2024-01"),
        ("december 2023", "2023-12"),
        (" 2024-03 ", "2024-03"),
        ("2024-13", None),
        ("Smarch 2024", None),
        ("January", None),
        (None, None),
    ],
)
def test_normalize_month(label, expected):
    assert normalize_month(label) == expected


def test_sort_months_is_chronological_with_unknown_last():
    labels = ["March 2024", "2024-01", "??", "February 2024", "December 2023"]
    assert sort_months(labels) == ["December 2023", "2024-01", "February 2024", "March 2024", "??"]
    assert month_sort_key("??")[0] == 1


def test_payload_frames(dashboard_raw):
    frames = payload_frames(DashboardPayload.model_validate(dashboard_raw))

    assert frames["monthly"]["month"].tolist() == ["2024-01", "February 2024", "March 2024"]
    assert frames["monthly"]["total"].tolist() == [150.0, 300.0, 600.0]
    assert len(frames["monthly_banks"]) == 6
    assert set(frames["media"]["category"]) == {"Digital", "Television", "Audio"}
    assert frames["bank_totals"].set_index("bank")["investment"].to_dict() == {"Chase Bank": 750.0, "TD Bank": 300.0}


def test_payload_frames_empty_payload():
    frames = payload_frames(DashboardPayload())
    assert all(frame.empty for frame in frames.values())
    assert list(frames["monthly"].columns) == ["month", "total"]


def test_load_payload_reads_dashboard_file(tmp_path, dashboard_raw):
    path = tmp_path / "dashboard-data.json"
    path.write_text(json.dumps(dashboard_raw), encoding="utf-8")
    payload = load_payload(path)
    assert set(payload.bankData) == {"Chase Bank", "TD Bank"}


def test_load_payload_adapts_aggregate(tmp_path):
    path = tmp_path / "bank.json"
    path.write_text(
        json.dumps({"totalInvestment": 10.0, "mediaDistribution": {"Digital": "100.00"}}),
        encoding="utf-8",
    )
    payload = load_payload(path, bank_name="PNC Bank")
    assert payload.bankData["PNC Bank"].totalInvestment == 10.0
    assert payload.mediaCategories == {"Digital": 100.0}


def test_load_payload_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_payload(tmp_path / "missing.json")
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"bankData": {"X": {"totalInvestment": "many"}}}), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_payload(bad)


def _ctx(dashboard_raw):
    payload = DashboardPayload.model_validate(dashboard_raw)
    frames = payload_frames(payload)
    return {
        "payload": payload,
        "months": frames["monthly"]["month"].tolist(),
        "banks": sorted(frames["bank_totals"]["bank"].tolist()),
        "categories": frames["media"]["category"].tolist(),
        **frames,
    }


def test_prepare_context_without_filters_keeps_everything(dashboard_raw):
    ctx = prepare_context(DashboardFilters(), _ctx(dashboard_raw))
    assert len(ctx["filtered_monthly"]) == 3
    assert ctx["filtered_banks"]["bank"].tolist() == ["Chase Bank", "TD Bank"]
    assert ctx["total_investment"] == 1050.0


def test_prepare_context_bank_filter_recomputes_month_totals(dashboard_raw):
    ctx = prepare_context({"selected_banks": ["TD Bank"]}, _ctx(dashboard_raw))
    assert ctx["filtered_monthly"]["total"].tolist() == [50.0, 100.0, 150.0]
    assert ctx["filtered_banks"]["bank"].tolist() == ["TD Bank"]
    assert ctx["total_investment"] == 300.0


def test_prepare_context_month_and_category_filters(dashboard_raw):
    ctx = prepare_context(
        {"selected_months": ["March 2024", "Nope"], "selected_categories": ["Audio"]},
        _ctx(dashboard_raw),
    )
    assert ctx["filtered_monthly"]["month"].tolist() == ["March 2024"]
    assert ctx["filtered_media"]["category"].tolist() == ["Audio"]


def test_prepare_context_top_n_limits_banks_not_total(dashboard_raw):
    ctx = prepare_context(DashboardFilters(top_n=1), _ctx(dashboard_raw))
    assert ctx["filtered_banks"]["bank"].tolist() == ["Chase Bank"]
    assert ctx["total_investment"] == 1050.0


def test_load_dashboard_data_prefers_dashboard_file(monkeypatch, tmp_path, dashboard_raw):
    dashboard_file = tmp_path / "dashboard-data.json"
    bank_file = tmp_path / "bank.json"
    dashboard_file.write_text(json.dumps(dashboard_raw), encoding="utf-8")
    bank_file.write_text(json.dumps({"totalInvestment": 1.0, "mediaDistribution": {}}), encoding="utf-8")
    monkeypatch.setattr(dc, "DASHBOARD_DATA_FILE", dashboard_file)
    monkeypatch.setattr(dc, "BANK_OUTPUT_FILE", bank_file)

    data_ctx = dc.load_dashboard_data()
    assert data_ctx["source"] == dashboard_file
    assert data_ctx["banks"] == ["Chase Bank", "TD Bank"]


def test_load_dashboard_data_without_files(monkeypatch, tmp_path):
    monkeypatch.setattr(dc, "DASHBOARD_DATA_FILE", tmp_path / "a.json")
    monkeypatch.setattr(dc, "BANK_OUTPUT_FILE", tmp_path / "b.json")
    assert dc.load_dashboard_data() == {"files": [], "months": [], "banks": [], "categories": []}


def test_loaded_bank_names_drive_the_bank_filter(monkeypatch, tmp_path, dashboard_raw):
    dashboard_file = tmp_path / "dashboard-data.json"
    dashboard_file.write_text(json.dumps(dashboard_raw), encoding="utf-8")
    monkeypatch.setattr(dc, "DASHBOARD_DATA_FILE", dashboard_file)
    monkeypatch.setattr(dc, "BANK_OUTPUT_FILE", tmp_path / "missing.json")

    data_ctx = dc.load_dashboard_data()
    assert isinstance(data_ctx["banks"], list)

    ctx = prepare_context({"selected_banks": ["TD Bank"]}, data_ctx)
    assert ctx["filters"]["selected_banks"] == ["TD Bank"]
    assert ctx["filtered_banks"]["bank"].tolist() == ["TD Bank"]
    assert ctx["filtered_monthly"]["total"].tolist() == [50.0, 100.0, 150.0]


def test_prepare_context_counts_banks_before_top_n(dashboard_raw):
    ctx = prepare_context(DashboardFilters(top_n=1), _ctx(dashboard_raw))
    assert len(ctx["filtered_banks"]) == 1
    assert ctx["bank_count"] == 2
