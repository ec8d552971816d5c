from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .extraction import ExtractionResult
from .reference_entry import ReferenceEntry
from .validation_outcome import ValidationOutcome

"""BatchItem domain model and ItemStatus enum.

A BatchItem is the processing context for a single image in a batch run,
tracking its status from pending to completed/skipped/error.
"""


class ItemStatus(Enum):
    """Status enum for BatchItem processing lifecycle.

    State transitions: pending -> processing -> (completed | error)
                       pending -> skipped (no matching reference row)
    """
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"
    SKIPPED = "SKIPPED"


@dataclass(frozen=True)
class BatchItem:
    """Processing context for a single image.

    Items are immutable; the driver derives the next state with
    dataclasses.replace().
    """
    path: Path
    name: str
    status: ItemStatus = ItemStatus.PENDING
    matched_entries: tuple[ReferenceEntry, ...] = ()  # ranked, may hold several rows
    extraction: ExtractionResult | None = None  # one model call per image
    validations: tuple[ValidationOutcome, ...] = ()  # one per matched entry
    error: str | None = None

    @classmethod
    def for_path(cls, path: Path, matched_entries: tuple[ReferenceEntry, ...] = ()) -> BatchItem:
        return cls(path=path, name=path.name, matched_entries=matched_entries)

    @property
    def is_done(self) -> bool:
        return self.status in (ItemStatus.COMPLETED, ItemStatus.SKIPPED)
