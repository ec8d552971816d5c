from __future__ import annotations

import re
from datetime import datetime, timezone

from dimcheck.models.processing_result import BatchResult
from dimcheck.services.summary import render_summary_line

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+images=([0-9]+)\s+completed=([0-9]+)\s+skipped=([0-9]+)\s+errors=([0-9]+)\s+"
    r"perfect=([0-9]+)\s+missing=([0-9]+)\s+extra=([0-9]+)\s+mismatch=([0-9]+)\s+"
    r"elapsed_sec=([0-9]+\.?[0-9]*)$"
)

START = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)


def _result(elapsed: float, **counts: int) -> BatchResult:
    return BatchResult(
        total_items=5,
        completed_items=3,
        skipped_items=1,
        error_items=1,
        start_time=START,
        end_time=START,
        elapsed_seconds=elapsed,
        validation_counts={k.upper(): v for k, v in counts.items()},
    )


def test_render_summary_line_fields():
    line = render_summary_line(_result(2.0, perfect=2, mismatch=1, extra=1))
    match = SUMMARY_PATTERN.match(line)
    assert match, line
    assert match.groups() == ("5", "3", "1", "1", "2", "0", "1", "1", "2")


def test_render_summary_line_fractional_elapsed():
    assert render_summary_line(_result(1.25)).endswith("elapsed_sec=1.25")


def test_render_summary_line_tiny_elapsed_has_no_exponent():
    line = render_summary_line(_result(0.000123))
    assert line.endswith("elapsed_sec=0.000123")
    assert SUMMARY_PATTERN.match(line)


def test_render_summary_line_zero():
    assert render_summary_line(_result(0.0)).endswith("elapsed_sec=0")
