from __future__ import annotations

from dataclasses import dataclass

from .reference_entry import ColumnRange

"""Config dataclasses for the dimension QC tool.

These are the typed form of config/dimcheck.yml produced by
dimcheck.config.loader.load_config().
"""

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_API_KEY_ENV = "GOOGLE_API_KEY"


@dataclass(frozen=True)
class ExtractionConfig:
    """Vision model settings.

    The API key itself is never stored in the config file; api_key_env names
    the environment variable (usually set through .env) that holds it.
    """
    model: str = DEFAULT_MODEL
    api_key_env: str = DEFAULT_API_KEY_ENV
    max_retries: int = 3
    retry_base_delay: float = 2.0


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object for a QC run."""
    spec_file: str  # reference spreadsheet (.xlsx / .xls / .csv)
    image_directory: str  # directory scanned for product images
    report_directory: str  # where Batch_Report_*.xlsx is written
    column_range: ColumnRange | None  # None -> heuristic dimension columns
    tolerance: float
    extraction: ExtractionConfig
