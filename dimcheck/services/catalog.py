from __future__ import annotations

import logging
from pathlib import Path

from ..excel.reader import SheetData, read_spec_sheet
from ..models.reference_entry import ColumnRange, ReferenceEntry
from ..spec.table import build_spec_table

"""Reference catalog: the current spec table snapshot.

The table is rebuilt from the raw sheet whenever the sheet or the column range
changes and published as an immutable tuple. Readers take snapshot() and keep
using it even if a reload happens meanwhile.
"""

logger = logging.getLogger(__name__)


class ReferenceCatalog:
    def __init__(self, column_range: ColumnRange | None = None) -> None:
        self._sheet: SheetData | None = None
        self._column_range = column_range
        self._entries: tuple[ReferenceEntry, ...] = ()

    @property
    def column_range(self) -> ColumnRange | None:
        return self._column_range

    @property
    def is_loaded(self) -> bool:
        return self._sheet is not None

    def load(self, path: Path) -> tuple[ReferenceEntry, ...]:
        """Read the spreadsheet and rebuild. SpecFileError propagates."""
        return self.load_sheet(read_spec_sheet(path))

    def load_sheet(self, sheet: SheetData) -> tuple[ReferenceEntry, ...]:
        self._sheet = sheet
        return self._rebuild()

    def configure(self, column_range: ColumnRange | None) -> tuple[ReferenceEntry, ...]:
        """Change the dimension column range and rebuild from the raw rows."""
        self._column_range = column_range
        return self._rebuild()

    def snapshot(self) -> tuple[ReferenceEntry, ...]:
        return self._entries

    def _rebuild(self) -> tuple[ReferenceEntry, ...]:
        if self._sheet is None:
            return self._entries
        entries = build_spec_table(self._sheet.rows, self._column_range, header=self._sheet.columns)
        self._entries = entries
        logger.info(
            "spec table built sheet=%s rows=%d entries=%d range=%s",
            self._sheet.sheet_name,
            len(self._sheet.rows),
            len(entries),
            self._column_range if self._column_range is not None else "auto",
        )
        return entries
