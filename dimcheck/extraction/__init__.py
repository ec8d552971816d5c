from .gemini import (
    DimensionExtractor,
    ExtractionError,
    GeminiExtractor,
    parse_extraction_payload,
)

__all__ = [
    "DimensionExtractor",
    "ExtractionError",
    "GeminiExtractor",
    "parse_extraction_payload",
]
