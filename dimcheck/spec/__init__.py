"""Spec matching & dimension validation engine.

Pure functions over in-memory values: no file I/O, no network, no shared
mutable state. Safe to call from several workers at once.
"""

from .columns import column_index_from_letters, select_columns
from .matcher import find_best_match, find_matches
from .numbers import extract_numbers
from .slug import slugify
from .table import build_spec_table
from .validator import TOLERANCE, no_match_outcome, validate

__all__ = [
    "TOLERANCE",
    "build_spec_table",
    "column_index_from_letters",
    "extract_numbers",
    "find_best_match",
    "find_matches",
    "no_match_outcome",
    "select_columns",
    "slugify",
    "validate",
]
