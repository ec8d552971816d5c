# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pandas as pd
import pytest

from dimcheck.logging.init import reset_logging
from dimcheck.models.extraction import ExtractionResult


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "images").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _fresh_logger():
    # handlers bind sys.stdout at creation; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """spec_file: ./data/specs.xlsx
image_directory: ./images
report_directory: ./reports
column_range:
  start: C
  end: E
tolerance: 0.5
extraction:
  model: gemini-test
  api_key_env: DIMCHECK_TEST_KEY
  max_retries: 0
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "dimcheck.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def make_xlsx(path: Path, rows: list[list[object]], sheet: str = "Specs") -> Path:
    """Write rows (first row = header) as the first sheet of a workbook."""
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


SPEC_SHEET_ROWS: list[list[object]] = [
    ["Product Name", "Size", "Width", "Depth", "Height", "Notes"],
    ["Round Side Table", "Small", 24, 24, 22, "oak"],
    ["Side Table", "Standard", 18, 18, 24, None],
    ["Mardi Marble Side Table", "Large", 20, 16, 21.5, "marble top"],
    ["Lounge Chair", "One", 30, 32, 28, None],
]


@pytest.fixture()
def spec_xlsx(temp_workdir: Path) -> Path:
    return make_xlsx(temp_workdir / "data" / "specs.xlsx", SPEC_SHEET_ROWS)


class FakeExtractor:
    """DimensionExtractor returning canned dimensions per file name."""

    def __init__(self, dimensions: dict[str, list[float]] | None = None, failures: dict[str, Exception] | None = None):
        self.dimensions = dimensions or {}
        self.failures = failures or {}
        self.calls: list[str] = []

    def extract_image(self, path: Path) -> ExtractionResult:
        self.calls.append(path.name)
        if path.name in self.failures:
            raise self.failures[path.name]
        return ExtractionResult(
            dimensions=tuple(self.dimensions.get(path.name, [])),
            units="inches",
            raw_text=f"dimensions of {path.name}",
        )


@pytest.fixture()
def fake_extractor_cls():
    return FakeExtractor


@pytest.fixture()
def images_dir(temp_workdir: Path) -> Path:
    images = temp_workdir / "images"
    for name in ["round-side-table-24in.jpg", "lounge_chair.png", "unknown-lamp.jpg"]:
        (images / name).write_bytes(b"\xff\xd8fake")
    (images / "notes.txt").write_text("not an image")
    return images


@pytest.fixture()
def xlsx_writer():
    return make_xlsx
