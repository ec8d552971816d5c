from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .reference_entry import ReferenceEntry

"""Validation outcome models.

ValidationOutcome is produced fresh per (detected set, reference entry) pairing
and never mutated after construction.
"""

__all__ = [
    "MatchedPair",
    "ValidationOutcome",
    "ValidationStatus",
]


class ValidationStatus(Enum):
    """Classification of a detected set against an expected set.

    - PERFECT: every expected and every detected value paired up
    - MISSING: expected values without a detected counterpart
    - EXTRA: detected values that explain no expected value
    - MISMATCH: both of the above
    - NO_MATCH: no reference entry found (assigned by the caller)
    """
    PERFECT = "PERFECT"
    MISSING = "MISSING"
    EXTRA = "EXTRA"
    MISMATCH = "MISMATCH"
    NO_MATCH = "NO_MATCH"


@dataclass(frozen=True)
class MatchedPair:
    expected: float
    detected: float
    difference: float  # absolute difference


@dataclass(frozen=True)
class ValidationOutcome:
    status: ValidationStatus
    matched_entry: ReferenceEntry | None
    matched_pairs: tuple[MatchedPair, ...] = ()
    unmatched_expected: tuple[float, ...] = ()
    unmatched_detected: tuple[float, ...] = ()

    @property
    def is_perfect(self) -> bool:
        return self.status is ValidationStatus.PERFECT
