from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import DEFAULT_API_KEY_ENV, DEFAULT_MODEL, AppConfig, ExtractionConfig
from ..models.reference_entry import ColumnRange
from ..spec.validator import TOLERANCE

"""Config loader.

Responsibilities:
- Load YAML config (default config/dimcheck.yml)
- Validate against the bundled JSON schema (config_schema.json)
- Apply defaults (report directory, tolerance, extraction settings)
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/dimcheck.yml")
DEFAULT_REPORT_DIRECTORY = "./reports"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails schema validation (missing required keys, wrong
            types, unknown keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    range_raw = data.get("column_range") or {}
    ext_raw = data.get("extraction") or {}
    extraction = ExtractionConfig(
        model=ext_raw.get("model", DEFAULT_MODEL),
        api_key_env=ext_raw.get("api_key_env", DEFAULT_API_KEY_ENV),
        max_retries=ext_raw.get("max_retries", 3),
        retry_base_delay=float(ext_raw.get("retry_base_delay", 2.0)),
    )
    return AppConfig(
        spec_file=data["spec_file"],
        image_directory=data["image_directory"],
        report_directory=data.get("report_directory", DEFAULT_REPORT_DIRECTORY),
        column_range=ColumnRange.from_letters(range_raw.get("start"), range_raw.get("end")),
        tolerance=float(data.get("tolerance", TOLERANCE)),
        extraction=extraction,
    )
