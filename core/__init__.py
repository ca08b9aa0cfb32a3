"""Core (UI-agnostic) media-spend dashboard logic.

This package contains:
- the CSV aggregator (benchmark CSV -> flat JSON summary)
- numeric coercion with a zero fallback
- payload loading and filter normalization
- the dashboard compute function (JSON-serializable payload)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
