"""Domain models for the dimension QC tool.

This package contains the value objects shared by the matching engine,
the batch driver and the report export.
"""

from .batch_item import BatchItem, ItemStatus
from .config_models import AppConfig, ExtractionConfig
from .extraction import ExtractionResult
from .reference_entry import ColumnRange, ReferenceEntry
from .validation_outcome import MatchedPair, ValidationOutcome, ValidationStatus

__all__ = [
    # Configuration models
    "AppConfig",
    "ExtractionConfig",
    # Reference table
    "ColumnRange",
    "ReferenceEntry",
    # Validation
    "MatchedPair",
    "ValidationOutcome",
    "ValidationStatus",
    # Batch processing
    "BatchItem",
    "ExtractionResult",
    "ItemStatus",
]
