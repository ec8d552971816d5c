from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from pathlib import Path

from ..extraction.gemini import DimensionExtractor, ExtractionError
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.batch_item import BatchItem, ItemStatus
from ..models.extraction import ExtractionResult
from ..models.processing_result import BatchResult
from ..models.reference_entry import ReferenceEntry
from ..models.validation_outcome import ValidationOutcome
from ..spec.matcher import find_best_match, find_matches
from ..spec.validator import TOLERANCE, no_match_outcome, validate
from .progress import ProgressTracker

"""Batch orchestration.

For every image:
1. match the file name against the reference table
2. no match -> SKIPPED, the extraction call is never made
3. otherwise one extraction call, then one validation per matched entry

Items are independent: a failure is recorded on that item (and in the JSON
Lines error log) and processing moves on to the next image.
"""

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".webp", ".gif", ".bmp"}
SKIPPED_MESSAGE = "Skipped: No matching Spec Row found"


class ProcessingError(Exception):
    """Fatal error that prevents a batch from running."""


@dataclass(frozen=True)
class SingleAnalysis:
    """Result of single-image mode."""
    extraction: ExtractionResult
    validation: ValidationOutcome | None  # None when no reference table is loaded


def scan_image_files(directory: Path) -> list[Path]:
    """Scan directory for image files (non-recursive, sorted by name).

    Raises:
        ProcessingError: If directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")

    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")

    try:
        return sorted(
            (p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in IMAGE_SUFFIXES),
            key=lambda p: p.name,
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def plan_batch(paths: Sequence[Path], table: Sequence[ReferenceEntry]) -> list[BatchItem]:
    """Pending items with their matches pre-computed."""
    return [BatchItem.for_path(path, tuple(find_matches(path.name, table))) for path in paths]


def _process_item(
    item: BatchItem,
    extractor: DimensionExtractor | None,
    tolerance: float,
    error_log: ErrorLogBuffer,
) -> BatchItem:
    if not item.matched_entries:
        logger.info("skip %s: no matching spec row", item.name)
        return replace(item, status=ItemStatus.SKIPPED, error=SKIPPED_MESSAGE)

    if extractor is None:
        raise ProcessingError(f"no extractor for matched image {item.name}")

    item = replace(item, status=ItemStatus.PROCESSING)
    try:
        extraction = extractor.extract_image(item.path)
    except ExtractionError as e:
        logger.error("extraction failed %s: %s", item.name, e)
        error_log.append(ErrorRecord.create(item.name, "extraction", "EXTRACTION_ERROR", str(e)))
        return replace(item, status=ItemStatus.ERROR, error=str(e))
    except Exception as e:
        logger.error("unexpected error %s: %s", item.name, e)
        error_log.append(ErrorRecord.create(item.name, "extraction", "UNEXPECTED_ERROR", str(e)))
        return replace(item, status=ItemStatus.ERROR, error=str(e))

    validations = tuple(validate(extraction.dimensions, entry, tolerance) for entry in item.matched_entries)
    for outcome in validations:
        logger.info(
            "%s vs %s -> %s",
            item.name,
            outcome.matched_entry.product_name if outcome.matched_entry else "-",
            outcome.status.value,
        )
    return replace(item, status=ItemStatus.COMPLETED, extraction=extraction, validations=validations)


def process_batch(
    items: Sequence[BatchItem],
    extractor: DimensionExtractor | None,
    tolerance: float = TOLERANCE,
    error_log: ErrorLogBuffer | None = None,
) -> BatchResult:
    """Run extraction + validation over planned items.

    Items already COMPLETED or SKIPPED are kept as they are, so a batch can be
    resumed with the items of a previous run.
    extractor may be None when no pending item has a matched entry.

    Returns:
        BatchResult with the final item states and aggregated counts
    """
    if extractor is None and any(item.matched_entries and not item.is_done for item in items):
        raise ProcessingError("an extractor is required for images with matching spec rows")

    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else ErrorLogBuffer()

    results: list[BatchItem] = []
    completed = skipped = failed = 0
    with ProgressTracker(len(items)) as progress:
        for item in items:
            progress.start_item(item.name)
            if not item.is_done:
                item = _process_item(item, extractor, tolerance, error_log)
            results.append(item)

            if item.status is ItemStatus.COMPLETED:
                completed += 1
            elif item.status is ItemStatus.SKIPPED:
                skipped += 1
            else:
                failed += 1
            progress.set_postfix(done=completed, skipped=skipped, errors=failed)
            progress.finish_item()

    try:
        log_path = error_log.flush()
    except OSError as e:
        logger.warning("failed to write error log: %s", e)
    else:
        if log_path is not None:
            logger.info("error log written: %s", log_path)

    return BatchResult.from_items(results, start_time, datetime.now(UTC))


def analyze_single(
    path: Path,
    table: Sequence[ReferenceEntry],
    extractor: DimensionExtractor,
    tolerance: float = TOLERANCE,
) -> SingleAnalysis:
    """Single-image mode: extract first, then validate against the best match.

    ExtractionError propagates to the caller.
    """
    extraction = extractor.extract_image(path)
    if not table:
        return SingleAnalysis(extraction=extraction, validation=None)
    entry = find_best_match(path.name, table)
    if entry is None:
        return SingleAnalysis(extraction=extraction, validation=no_match_outcome())
    return SingleAnalysis(extraction=extraction, validation=validate(extraction.dimensions, entry, tolerance))
