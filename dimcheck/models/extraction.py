from __future__ import annotations

from dataclasses import dataclass

"""ExtractionResult model: what the vision model reported for one image."""

__all__ = [
    "ExtractionResult",
]


@dataclass(frozen=True)
class ExtractionResult:
    """Parsed response of the dimension extraction call.

    Attributes:
        dimensions: Raw detected numbers, in the order the model returned them
        units: Most likely unit of measurement ("unknown" when not reported)
        markdown_table: Model supplied summary table for display
        raw_text: Short free-text observation
    """
    dimensions: tuple[float, ...]
    units: str = "unknown"
    markdown_table: str = ""
    raw_text: str = ""
