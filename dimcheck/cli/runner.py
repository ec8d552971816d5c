from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from dimcheck.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from dimcheck.excel.reader import SpecFileError
from dimcheck.extraction.gemini import DimensionExtractor, ExtractionError, GeminiExtractor
from dimcheck.logging.error_log import ErrorLogBuffer
from dimcheck.logging.init import log_summary, setup_logging
from dimcheck.models.error_record import RUN_LEVEL, ErrorRecord
from dimcheck.models.config_models import AppConfig
from dimcheck.models.reference_entry import ColumnRange, ReferenceEntry
from dimcheck.services.catalog import ReferenceCatalog
from dimcheck.services.orchestrator import (
    ProcessingError,
    analyze_single,
    plan_batch,
    process_batch,
    scan_image_files,
)
from dimcheck.services.report import format_number, write_report
from dimcheck.services.summary import render_summary_line

"""CLI implementation for python -m dimcheck.cli

Flow:
- load .env (API key) and the YAML config
- read the reference spreadsheet and build the spec table
- batch mode: match every image, extract dimensions for matched ones only,
  validate, write the xlsx report, print the SUMMARY line
- single mode (--image): extract and validate one image against its best match
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env; its values win over the existing environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Validate product image dimensions against a spec spreadsheet")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-spec", action="store_true", help="Print the parsed spec table then exit")
    p.add_argument("--start-col", default=None, help="First dimension column letter (overrides config)")
    p.add_argument("--end-col", default=None, help="Last dimension column letter (overrides config)")
    p.add_argument("--image", type=Path, default=None, help="Validate a single image instead of a batch")
    p.add_argument("--no-report", action="store_true", help="Do not write the xlsx batch report")
    return p.parse_args(argv)


def _column_range(args: argparse.Namespace, cfg: AppConfig) -> ColumnRange | None:
    if args.start_col is None and args.end_col is None:
        return cfg.column_range
    start = args.start_col if args.start_col is not None else (cfg.column_range.start_column if cfg.column_range else "")
    end = args.end_col if args.end_col is not None else (cfg.column_range.end_column if cfg.column_range else "")
    return ColumnRange.from_letters(start, end)


def _build_extractor(cfg: AppConfig) -> GeminiExtractor:
    api_key = os.getenv(cfg.extraction.api_key_env)
    if not api_key:
        raise ExtractionError(f"environment variable {cfg.extraction.api_key_env} is not set")
    return GeminiExtractor(
        api_key=api_key,
        model=cfg.extraction.model,
        max_retries=cfg.extraction.max_retries,
        retry_base_delay=cfg.extraction.retry_base_delay,
    )


def _record_fatal(error_log: ErrorLogBuffer, file: str, stage: str, error_type: str, message: str) -> None:
    error_log.append(ErrorRecord.create(file, stage, error_type, message))
    try:
        error_log.flush()
    except OSError as e:
        setup_logging().warning(f"failed to write error log: {e}")


def _inspect_spec(entries: tuple[ReferenceEntry, ...]) -> int:
    print(f"entries={len(entries)}")
    for entry in entries:
        dims = " x ".join(format_number(d) for d in entry.expected_dimensions) or "-"
        print(f"  {entry.product_slug}  name={entry.product_name!r} size={entry.size!r} dims={dims}")
    return EXIT_SUCCESS_ALL


def _run_single(image: Path, catalog: ReferenceCatalog, extractor: DimensionExtractor, tolerance: float) -> int:
    logger = setup_logging()
    if not image.exists():
        logger.error(f"image not found: {image}")
        return EXIT_FATAL
    try:
        analysis = analyze_single(image, catalog.snapshot(), extractor, tolerance)
    except ExtractionError as e:
        logger.error(f"extraction: {e}")
        return EXIT_PARTIAL_FAILURE
    dims = " x ".join(format_number(d) for d in analysis.extraction.dimensions) or "-"
    logger.info(f"{image.name} detected={dims} units={analysis.extraction.units}")
    if analysis.extraction.raw_text:
        logger.info(f"observation: {analysis.extraction.raw_text}")
    outcome = analysis.validation
    if outcome is None:
        logger.info("no spec table loaded, validation skipped")
    elif outcome.matched_entry is None:
        logger.warning(f"{image.name} status={outcome.status.value}")
    else:
        logger.info(
            f"{image.name} vs {outcome.matched_entry.product_name} status={outcome.status.value} "
            f"missing={list(outcome.unmatched_expected)} extra={list(outcome.unmatched_detected)}"
        )
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None, extractor: DimensionExtractor | None = None) -> int:
    # None only: an explicit [] from tests must not pick up pytest's own argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    error_log = ErrorLogBuffer()
    catalog = ReferenceCatalog(_column_range(args, cfg))
    try:
        entries = catalog.load(Path(cfg.spec_file))
    except SpecFileError as e:
        logger.error(f"spec: {e}")
        _record_fatal(error_log, Path(cfg.spec_file).name, "spec_load", "SPEC_FILE_ERROR", str(e))
        return EXIT_FATAL

    if args.inspect_spec:
        return _inspect_spec(entries)

    if args.image is not None:
        if extractor is None:
            try:
                extractor = _build_extractor(cfg)
            except ExtractionError as e:
                logger.error(f"extraction: {e}")
                return EXIT_FATAL
        return _run_single(args.image, catalog, extractor, cfg.tolerance)

    directory = Path(cfg.image_directory)
    try:
        paths = scan_image_files(directory)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        _record_fatal(error_log, RUN_LEVEL, "scan", "DIRECTORY_ERROR", str(e))
        return EXIT_FATAL
    logger.info(f"Processing {len(paths)} images from: {directory}")

    items = plan_batch(paths, catalog.snapshot())
    if extractor is None and any(item.matched_entries for item in items):
        try:
            extractor = _build_extractor(cfg)
        except ExtractionError as e:
            logger.error(f"extraction: {e}")
            return EXIT_FATAL

    result = process_batch(items, extractor, cfg.tolerance, error_log)

    if not args.no_report and result.items:
        try:
            report = write_report(result.items, Path(cfg.report_directory))
        except OSError as e:
            logger.error(f"report: {e}")
            _record_fatal(error_log, RUN_LEVEL, "report", "REPORT_WRITE_ERROR", str(e))
            return EXIT_FATAL
        logger.info(f"report written: {report}")

    summary_line = render_summary_line(result)
    log_summary(summary_line[len("SUMMARY "):])

    if result.error_items > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL
