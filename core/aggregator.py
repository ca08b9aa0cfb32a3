"""Build-time aggregation of a bank media benchmark CSV into a JSON summary.

The input is read as plain comma-separated text: every line is split on ``,``
and values are trimmed, with no quoting or escaping. A comma inside a field is
therefore not supported. Numeric fields go through the zero-fallback coercion
in :mod:`core.coercion`, so a bad value never aborts the run or drops the row.

Usage::

    python -m core.aggregator
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from core.coercion import to_float, to_int
from core.data import BANK_INPUT_FILE, BANK_NAME, BANK_OUTPUT_FILE, MEDIA_CATEGORIES

logger = logging.getLogger(__name__)

Row = Dict[str, Optional[str]]


def parse_header(line: str) -> List[str]:
    return [h.strip() for h in line.lstrip("\ufeff").split(",")]


def parse_line(headers: List[str], line: str) -> Row:
    """Label the values of ``line`` by position; missing trailing fields are ``None``."""
    values = [v.strip() for v in line.split(",")]
    return {h: (values[i] if i < len(values) else None) for i, h in enumerate(headers)}


def iter_rows(path: Path | str) -> Iterator[Row]:
    headers: Optional[List[str]] = None
    with Path(path).open("r", encoding="utf-8", errors="replace") as fh:
        for line in fh:
            line = line.rstrip("\r\n")
            if headers is None:
                headers = parse_header(line)
                continue
            if not line.strip():
                continue
            yield parse_line(headers, line)


@dataclass
class MediaAccumulator:
    total_investment: float = 0.0
    total_impressions: int = 0
    total_clicks: int = 0
    total_engagement: int = 0
    category_investment: Dict[str, float] = field(
        default_factory=lambda: {c: 0.0 for c in MEDIA_CATEGORIES}
    )
    unattributed_investment: float = 0.0
    rows: int = 0

    def add_row(self, row: Row) -> None:
        investment = to_float(row.get("Investment"))
        self.total_investment += investment
        self.total_impressions += to_int(row.get("Impressions"))
        self.total_clicks += to_int(row.get("Clicks"))
        self.total_engagement += to_int(row.get("Engagement"))

        category = row.get("Media Category")
        if category in self.category_investment:
            self.category_investment[category] += investment
        else:
            self.unattributed_investment += investment
        self.rows += 1

    def distribution(self) -> Dict[str, str]:
        # Zero total spend reports every category as 0.00 rather than NaN.
        total = self.total_investment
        return {
            c: f"{(self.category_investment[c] / total * 100) if total else 0.0:.2f}"
            for c in MEDIA_CATEGORIES
        }

    def finalize(self) -> Dict[str, object]:
        return {
            "totalInvestment": self.total_investment,
            "totalImpressions": self.total_impressions,
            "totalClicks": self.total_clicks,
            "totalEngagement": self.total_engagement,
            "mediaDistribution": self.distribution(),
        }


def aggregate_file(path: Path | str) -> MediaAccumulator:
    acc = MediaAccumulator()
    for row in iter_rows(path):
        acc.add_row(row)
    return acc


def render_aggregate(aggregate: Dict[str, object]) -> str:
    return json.dumps(aggregate, indent=2, ensure_ascii=False)


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_aggregate(aggregate: Dict[str, object], path: Path | str) -> Path:
    """Write ``aggregate`` as formatted JSON, replacing ``path`` atomically."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=out.parent, prefix=f".{out.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(render_aggregate(aggregate))
        os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, out)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    return out


def process_file(input_path: Path | str, output_path: Path | str) -> Dict[str, object]:
    acc = aggregate_file(input_path)
    aggregate = acc.finalize()
    write_aggregate(aggregate, output_path)

    logger.info(
        "Aggregated %d rows from %s: investment=%.2f impressions=%d clicks=%d engagement=%d",
        acc.rows,
        input_path,
        acc.total_investment,
        acc.total_impressions,
        acc.total_clicks,
        acc.total_engagement,
    )
    if acc.unattributed_investment:
        logger.warning(
            "%.2f of %.2f investment had a media category outside %s and is not in mediaDistribution",
            acc.unattributed_investment,
            acc.total_investment,
            ", ".join(MEDIA_CATEGORIES),
        )
    return aggregate


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        process_file(BANK_INPUT_FILE, BANK_OUTPUT_FILE)
    except OSError:
        logger.exception("Processing %s failed", BANK_INPUT_FILE)
        raise
    print(f"{BANK_NAME} performance data processed successfully!")


if __name__ == "__main__":  # pragma: no cover
    main()
