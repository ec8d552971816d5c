from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""Reference table models.

ReferenceEntry is one authoritative product row with its expected dimension set.
ColumnRange is the user supplied spreadsheet column-letter range used to pick
the columns scanned for dimensions.
"""

__all__ = [
    "ColumnRange",
    "ReferenceEntry",
]


@dataclass(frozen=True)
class ReferenceEntry:
    """One product row of the reference spreadsheet after normalization.

    Built once per row by the spec table builder and never mutated afterwards.
    A reload or a column range change rebuilds the whole table.
    """
    product_name: str  # trimmed, never empty
    product_slug: str  # slugify(product_name), may collide across rows
    size: str  # free-text display label ("" when no size column)
    expected_dimensions: tuple[float, ...]  # ascending, duplicates allowed
    source_row: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class ColumnRange:
    """Spreadsheet column-letter range, e.g. G..M (inclusive).

    start <= end is not enforced here: an inverted or invalid range simply
    selects no columns.
    """
    start_column: str
    end_column: str

    @classmethod
    def from_letters(cls, start: str | None, end: str | None) -> ColumnRange | None:
        """Return a range, or None when either side is blank (range disabled)."""
        start = (start or "").strip()
        end = (end or "").strip()
        if not start or not end:
            return None
        return cls(start_column=start.upper(), end_column=end.upper())

    def __str__(self) -> str:  # pragma: no cover (display only)
        return f"{self.start_column}:{self.end_column}"
