"""
Utility Functions for Telemetry CSV Ingestion

This module provides helper functions for numeric conversion, rounding and
raw-text handling used throughout the ingestion pipeline.
"""

import re
import numpy as np
from typing import Iterator, List, Optional
from . import constants


_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def safe_float(value) -> float:
    """
    Safely convert a value to float, returning NaN on failure.

    Args:
        value: Value to convert (string, number, etc.).

    Returns:
        Float value, or np.nan if conversion fails.
    """
    try:
        return float(value)
    except (TypeError, ValueError):
        return np.nan


def round_float(value, digits: int = 3) -> Optional[float]:
    """
    Round a float value, handling None, NaN, and Inf.

    Args:
        value: Value to round.
        digits: Number of decimal places. Default 3.

    Returns:
        Rounded float, or None if value is None, NaN, or Inf.
    """
    if value is None or (isinstance(value, float) and (np.isnan(value) or np.isinf(value))):
        return None
    return round(float(value), digits)


def iter_lines(text: str) -> Iterator[str]:
    """
    Yield raw lines one at a time, split on \\n, \\r\\n or a lone \\r.

    Unlike the tokenizer this ignores quoting entirely; it is what the
    raw-line detectors and extractors scan.
    """
    if not text:
        return
    start = 0
    for match in _LINE_BREAK.finditer(text):
        yield text[start:match.start()]
        start = match.end()
    yield text[start:]


def split_lines(text: str) -> List[str]:
    """Split raw text into a list of lines (see iter_lines)."""
    return list(iter_lines(text))


def build_preview(text: str, max_lines: int = constants.PREVIEW_LINES,
                  max_chars: int = constants.PREVIEW_LINE_CHARS) -> List[str]:
    """
    Build a short preview of the first non-blank raw lines of an upload.

    Lines are located lazily and only their first max_chars characters are
    copied, so the cost is bounded by the preview rather than the upload.

    Args:
        text: Raw upload text.
        max_lines: Maximum number of lines returned. Default PREVIEW_LINES.
        max_chars: Each line is cut to this many characters. Default PREVIEW_LINE_CHARS.

    Returns:
        List of at most max_lines strings.
    """
    preview = []
    if not text:
        return preview

    start = 0
    ends = (m.span() for m in _LINE_BREAK.finditer(text))
    while len(preview) < max_lines and start <= len(text):
        line_end, next_start = next(ends, (len(text), len(text) + 1))
        line = text[start:min(line_end, start + max_chars)]
        if line.strip():
            preview.append(line)
        start = next_start
    return preview
