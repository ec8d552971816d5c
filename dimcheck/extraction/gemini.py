from __future__ import annotations

import json
import logging
import math
import mimetypes
import re
import time
from collections.abc import Callable
from numbers import Real
from pathlib import Path
from typing import Any, Protocol

import google.genai as genai
from google.genai import types

from ..models.extraction import ExtractionResult

"""Dimension extraction through a Gemini vision model.

One generate_content call per image, JSON response mode. The response is
parsed into ExtractionResult; anything unusable raises ExtractionError so the
batch driver can mark that single item as failed.
"""

logger = logging.getLogger(__name__)

IMAGE_PROMPT = """
You are a Quality Control AI specializing in Dimension Extraction.

TASK:
Analyze the image and extract ALL numerical dimensions (length, width, height, etc.).

OUTPUT FORMAT:
Return a valid JSON object. Do not wrap in markdown code blocks.

JSON Structure:
{
  "dimensions": [number, number, ...],
  "units": "string (inches, cm, mm, etc)",
  "markdown_table": "A formatted markdown table summarizing the findings for display",
  "raw_text": "A brief summary of what was found"
}

RULES:
1. Convert fractions to decimals if found (e.g., 1/2 -> 0.5).
2. Filter out non-dimension numbers like Barcodes, IDs, or Dates unless they look like dimensions.
3. Identify the most likely unit of measurement.
"""

TEXT_PROMPT = """
Extract dimensions from this text data.
Return JSON: { "dimensions": [], "units": "unknown", "markdown_table": "...", "raw_text": "..." }
Data: {data}
"""

_FENCE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL)
_RATE_LIMIT_MARKERS = ("429", "RESOURCE_EXHAUSTED", "quota")


class ExtractionError(Exception):
    """Raised when dimensions cannot be obtained for an input."""


class DimensionExtractor(Protocol):
    def extract_image(self, path: Path) -> ExtractionResult: ...


def _as_float(value: Any) -> float | None:
    """Finite float for a reported dimension, None for anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Real):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    # nan and inf are not dimensions
    return number if math.isfinite(number) else None


def parse_extraction_payload(text: str | None) -> ExtractionResult:
    """Parse the model's JSON answer.

    A ```json fenced block is accepted. Missing keys fall back to empty
    defaults; dimension entries that are not numbers are dropped.
    """
    if not text or not text.strip():
        raise ExtractionError("No response from model.")
    fenced = _FENCE.match(text)
    body = fenced.group(1) if fenced else text
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"model returned invalid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise ExtractionError(f"model returned {type(payload).__name__}, expected an object")

    raw_dims = payload.get("dimensions") or []
    if not isinstance(raw_dims, list):
        raw_dims = [raw_dims]
    dimensions = tuple(d for d in (_as_float(v) for v in raw_dims) if d is not None)
    return ExtractionResult(
        dimensions=dimensions,
        units=str(payload.get("units") or "unknown"),
        markdown_table=str(payload.get("markdown_table") or ""),
        raw_text=str(payload.get("raw_text") or ""),
    )


def _is_rate_limited(error: Exception) -> bool:
    message = str(error)
    return any(marker.lower() in message.lower() for marker in _RATE_LIMIT_MARKERS)


class GeminiExtractor:
    """DimensionExtractor backed by google-genai.

    Rate limit errors (429 / RESOURCE_EXHAUSTED / quota) are retried with
    exponential backoff: retry_base_delay * 2**attempt seconds.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gemini-2.5-flash",
        max_retries: int = 3,
        retry_base_delay: float = 2.0,
        client: Any = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if client is None:
            if not api_key:
                raise ExtractionError("API key is required for Gemini extraction")
            client = genai.Client(api_key=api_key)
        self.client = client
        self.model = model
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self._sleep = sleep

    def extract_image(self, path: Path) -> ExtractionResult:
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ExtractionError(f"cannot read image {path.name}: {e}") from e
        mime_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
        contents = [types.Part.from_bytes(data=data, mime_type=mime_type), IMAGE_PROMPT]
        logger.debug("extract image=%s mime=%s bytes=%d model=%s", path.name, mime_type, len(data), self.model)
        return self._generate(contents, label=path.name)

    def extract_text(self, text: str) -> ExtractionResult:
        return self._generate([TEXT_PROMPT.replace("{data}", text)], label="<text>")

    def _generate(self, contents: list[Any], label: str) -> ExtractionResult:
        config = types.GenerateContentConfig(response_mime_type="application/json")
        attempt = 0
        while True:
            try:
                response = self.client.models.generate_content(
                    model=self.model,
                    contents=contents,
                    config=config,
                )
                break
            except Exception as e:
                if _is_rate_limited(e) and attempt < self.max_retries:
                    wait = self.retry_base_delay * (2 ** attempt)
                    attempt += 1
                    logger.warning(
                        "rate limited on %s, retry %d/%d after %.1fs", label, attempt, self.max_retries, wait
                    )
                    self._sleep(wait)
                    continue
                raise ExtractionError(f"Error analyzing content: {e}") from e
        return parse_extraction_payload(getattr(response, "text", None))
