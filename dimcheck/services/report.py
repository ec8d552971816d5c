from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.batch_item import BatchItem, ItemStatus

"""Batch report export.

One spreadsheet row per validation (an image matching two spec rows gets two
report rows). Skipped and failed images get a single explanatory row.
"""

REPORT_SHEET = "Batch Report"
REPORT_COLUMNS = [
    "File Name",
    "Processing Status",
    "Reason",
    "Detected Dimensions",
    "Matched Product",
    "Expected Dimensions",
    "Validation Status",
    "Missing",
    "Extra",
    "AI Observation",
]
SKIP_REASON = "No matching product spec found in Excel"
NOT_AVAILABLE = "N/A"


def format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _join(values: Iterable[float], sep: str) -> str:
    return sep.join(format_number(v) for v in values)


def build_report_rows(items: Sequence[BatchItem]) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for item in items:
        if item.status is ItemStatus.SKIPPED:
            rows.append({
                "File Name": item.name,
                "Processing Status": ItemStatus.SKIPPED.value,
                "Reason": SKIP_REASON,
                "Detected Dimensions": NOT_AVAILABLE,
                "Matched Product": NOT_AVAILABLE,
                "Validation Status": NOT_AVAILABLE,
            })
            continue

        detected = _join(item.extraction.dimensions, " x ") if item.extraction else ""
        detected = detected or NOT_AVAILABLE
        observation = item.extraction.raw_text if item.extraction else ""

        if item.validations:
            for outcome in item.validations:
                entry = outcome.matched_entry
                rows.append({
                    "File Name": item.name,
                    "Processing Status": item.status.value,
                    "Reason": "",
                    "Detected Dimensions": detected,
                    "Matched Product": entry.product_name if entry else NOT_AVAILABLE,
                    "Expected Dimensions": _join(entry.expected_dimensions, " x ") if entry else NOT_AVAILABLE,
                    "Validation Status": outcome.status.value,
                    "Missing": _join(outcome.unmatched_expected, ", "),
                    "Extra": _join(outcome.unmatched_detected, ", "),
                    "AI Observation": observation,
                })
        else:
            rows.append({
                "File Name": item.name,
                "Processing Status": item.status.value,
                "Reason": item.error or "Unknown Error",
                "Detected Dimensions": detected,
                "Matched Product": "NO MATCH",
                "Expected Dimensions": "",
                "Validation Status": "ERROR",
                "Missing": "",
                "Extra": "",
                "AI Observation": item.error or observation,
            })
    return rows


def report_file_name(now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    return f"Batch_Report_{now.strftime('%Y-%m-%dT%H-%M-%S')}.xlsx"


def write_report(items: Sequence[BatchItem], directory: Path, now: datetime | None = None) -> Path:
    """Write the batch report workbook and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / report_file_name(now)
    df = pd.DataFrame(build_report_rows(items), columns=REPORT_COLUMNS)
    with pd.ExcelWriter(path) as writer:
        df.to_excel(writer, sheet_name=REPORT_SHEET, index=False)
    return path
