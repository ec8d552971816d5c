from __future__ import annotations

from ..models.processing_result import BatchResult
from ..models.validation_outcome import ValidationStatus

"""Summary line rendering.

Format:
SUMMARY images={n} completed={n} skipped={n} errors={n} perfect={n}
missing={n} extra={n} mismatch={n} elapsed_sec={num}
"""


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(value)


def render_summary_line(result: BatchResult) -> str:
    """Render the SUMMARY line for a batch.

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> result = BatchResult(
        ...     total_items=3, completed_items=2, skipped_items=1, error_items=0,
        ...     start_time=start, end_time=start, elapsed_seconds=2.0,
        ...     validation_counts={"PERFECT": 2},
        ... )
        >>> render_summary_line(result)
        'SUMMARY images=3 completed=2 skipped=1 errors=0 perfect=2 missing=0 extra=0 mismatch=0 elapsed_sec=2'
    """
    return (
        f"SUMMARY images={result.total_items} "
        f"completed={result.completed_items} "
        f"skipped={result.skipped_items} "
        f"errors={result.error_items} "
        f"perfect={result.count(ValidationStatus.PERFECT)} "
        f"missing={result.count(ValidationStatus.MISSING)} "
        f"extra={result.count(ValidationStatus.EXTRA)} "
        f"mismatch={result.count(ValidationStatus.MISMATCH)} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)}"
    )
