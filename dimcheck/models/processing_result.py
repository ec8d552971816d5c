from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime

from .batch_item import BatchItem, ItemStatus
from .validation_outcome import ValidationStatus

"""Processing result models for a batch run.

BatchResult aggregates the per-item outcomes and the timing needed for the
SUMMARY output line.
"""


@dataclass(frozen=True)
class BatchResult:
    """Aggregated results of one batch run."""
    total_items: int
    completed_items: int
    skipped_items: int
    error_items: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    validation_counts: dict[str, int] = field(default_factory=dict)  # ValidationStatus.value -> count
    items: list[BatchItem] = field(default_factory=list)

    @classmethod
    def from_items(cls, items: list[BatchItem], start_time: datetime, end_time: datetime) -> BatchResult:
        statuses = Counter(item.status for item in items)
        validation_counts: Counter[str] = Counter()
        for item in items:
            for outcome in item.validations:
                validation_counts[outcome.status.value] += 1
        return cls(
            total_items=len(items),
            completed_items=statuses[ItemStatus.COMPLETED],
            skipped_items=statuses[ItemStatus.SKIPPED],
            error_items=statuses[ItemStatus.ERROR],
            start_time=start_time,
            end_time=end_time,
            elapsed_seconds=(end_time - start_time).total_seconds(),
            validation_counts=dict(validation_counts),
            items=items,
        )

    def count(self, status: ValidationStatus) -> int:
        return self.validation_counts.get(status.value, 0)
