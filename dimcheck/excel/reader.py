from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

"""Reference spreadsheet reader.

The first sheet only is read. Its first row is the header, every following
row becomes a header label -> cell value map. Fully blank rows are skipped and
empty cells become None. CSV files are read under the same rules.
"""

EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}
CSV_SUFFIXES = {".csv"}


class SpecFileError(Exception):
    """Raised when the reference spreadsheet cannot be read."""


@dataclass
class SheetData:
    sheet_name: str
    columns: list[str]
    rows: list[dict[str, Any]]  # header label -> cell value (None when empty)


def _read_raw(path: Path) -> tuple[str, pd.DataFrame]:
    suffix = path.suffix.lower()
    if suffix in CSV_SUFFIXES:
        return path.stem, pd.read_csv(path, header=None, skip_blank_lines=True)
    if suffix in EXCEL_SUFFIXES:
        xls = pd.ExcelFile(path)
        first = xls.sheet_names[0]
        return str(first), xls.parse(first, header=None)
    raise SpecFileError(f"unsupported spec file type: {path.name}")


def _header_labels(values: list[Any]) -> list[str]:
    """Header labels, unique per sheet.

    Repeated labels get a numeric suffix (Inches, Inches_1, Inches_2) so that
    every column keeps its own cell in the row maps.
    """
    labels: list[str] = []
    seen: set[str] = set()
    for idx, value in enumerate(values):
        base = ("" if pd.isna(value) else str(value).strip()) or f"__EMPTY_{idx}"
        label = base
        n = 0
        while label in seen:
            n += 1
            label = f"{base}_{n}"
        seen.add(label)
        labels.append(label)
    return labels


def normalize_sheet(df: pd.DataFrame, sheet_name: str) -> SheetData:
    """Normalize a raw DataFrame using the first row as header.

    An empty frame gives a SheetData without columns or rows.
    """
    if df.shape[0] == 0:
        return SheetData(sheet_name=sheet_name, columns=[], rows=[])
    columns = _header_labels(df.iloc[0].tolist())
    rows: list[dict[str, Any]] = []
    for _, raw in df.iloc[1:].iterrows():
        if raw.isna().all():
            continue
        row_dict: dict[str, Any] = {}
        for col, val in zip(columns, raw.tolist(), strict=False):
            if pd.isna(val):
                row_dict[col] = None
            elif isinstance(val, str) and val.strip() == "":
                row_dict[col] = None
            else:
                row_dict[col] = val
        rows.append(row_dict)
    return SheetData(sheet_name=sheet_name, columns=columns, rows=rows)


def read_spec_sheet(path: Path) -> SheetData:
    """Read the first sheet of a reference spreadsheet.

    Raises:
        SpecFileError: file missing, unsupported type or undecodable workbook
    """
    if not path.exists():
        raise SpecFileError(f"spec file not found: {path}")
    try:
        sheet_name, df = _read_raw(path)
    except SpecFileError:
        raise
    except pd.errors.EmptyDataError:
        return SheetData(sheet_name=path.stem, columns=[], rows=[])
    except Exception as e:
        raise SpecFileError(f"failed to read {path.name}: {e}") from e
    return normalize_sheet(df, sheet_name)
