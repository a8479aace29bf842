"""
Session Metadata Extraction for Telemetry CSV Ingestion

This module recovers session descriptors (driver, car, track, session type,
conditions) from uploads. Three independent heuristics each return a partial
SessionMetadata; merge_metadata() folds them by precedence:

    SCCA header > SCCA key-value > row-scanned
"""

import re
from typing import Dict, List, Optional
from . import constants
from . import utils
from .models import METADATA_FIELDS, SessionMetadata
from .tokenizer import Row


_SCCA_HEADER_FIELDS = {
    "racer": "driver_name",
    "vehicle": "car",
    "venue": "track",
}
_SCCA_HEADER_LINE = re.compile(r"^(Racer|Vehicle|Venue)\s*[\t, ]+(.+?)\s*$", re.IGNORECASE)
_TRAILING_SEPARATORS = re.compile(r"[,\t]+$")

_KEY_VALUE_SPLIT = re.compile(r"[,\t]|\s{2,}")
_KEY_VALUE_FIELDS = {
    "venue": "track",
    "vehicle": "car",
    "racer": "driver_name",
}

_COLON_PAIR = re.compile(r"^([^:]+):\s*(.+)$")


def extract_scca_header_metadata(raw_text: str) -> SessionMetadata:
    """
    Extract driver, car and track from SCCA header lines.

    Handles lines like "Venue    Sebring Full", "Vehicle\\tNP01-090" or
    "Racer, Jason", tolerating tabs, commas or spaces as separators. A later
    line for the same key replaces an earlier one.

    Args:
        raw_text: Raw file content.

    Returns:
        SessionMetadata with at most driver_name, car and track set.
    """
    found: Dict[str, str] = {}

    for line in utils.split_lines(raw_text):
        trimmed = line.strip()
        if not trimmed:
            continue

        match = _SCCA_HEADER_LINE.match(trimmed)
        if not match:
            continue

        value = _TRAILING_SEPARATORS.sub("", match.group(2).strip()).strip()
        if value:
            found[_SCCA_HEADER_FIELDS[match.group(1).lower()]] = value

    return SessionMetadata(**found)


def extract_key_value_metadata(lines: List[str]) -> SessionMetadata:
    """
    Extract metadata from SCCA key-value lines.

    Each line is split on commas, tabs or runs of two or more spaces; the
    first part is the key and the rest, joined by single spaces, the value.
    """
    found: Dict[str, str] = {}

    for line in lines:
        if not line or not line.strip():
            continue

        parts = [p.strip() for p in _KEY_VALUE_SPLIT.split(line)]
        parts = [p for p in parts if p]
        if len(parts) < 2:
            continue

        key = parts[0].lower()
        value = " ".join(parts[1:]).strip()
        if not value:
            continue

        if key in _KEY_VALUE_FIELDS:
            found[_KEY_VALUE_FIELDS[key]] = value
        elif key == "championship" and "session_type" not in found:
            found["session_type"] = value

    return SessionMetadata(**found)


def _classify_key(key: str, found: Dict[str, str]) -> Optional[str]:
    """Map a free-form key to a metadata field name, or None."""
    if "driver" in key and "name" in key:
        return "driver_name"
    if "driver" in key and "driver_name" not in found:
        return "driver_name"
    if "vehicle" in key or "car" in key:
        return "car"
    if "track" in key:
        return "track"
    if "session" in key and ("type" in key or "kind" in key):
        return "session_type"
    if "condition" in key or "weather" in key:
        return "conditions"
    return None


def extract_row_metadata(rows: List[Row], scan_limit: int = constants.METADATA_SCAN_ROWS) -> SessionMetadata:
    """
    Extract metadata from the first rows of a tokenized table.

    Rows with two or more cells are read as key/value in columns 0 and 1.
    Single-cell rows are read as "Key: value". Keys match by substring, so
    "Driver Name" and "Driver" both map to driver_name, with the more
    specific match taking priority.

    Args:
        rows: Tokenized rows.
        scan_limit: Number of leading rows examined. Default METADATA_SCAN_ROWS.

    Returns:
        SessionMetadata with any recognised fields set.
    """
    found: Dict[str, str] = {}

    for row in rows[:scan_limit]:
        if not row:
            continue

        if len(row) >= 2:
            key, value = row[0].lower().strip(), row[1].strip()
        else:
            match = _COLON_PAIR.match(row[0].strip())
            if not match:
                continue
            key, value = match.group(1).lower().strip(), match.group(2).strip()

        if not value:
            continue

        name = _classify_key(key, found)
        if name:
            found[name] = value

    return SessionMetadata(**found)


def merge_metadata(*sources: SessionMetadata) -> SessionMetadata:
    """
    Fold metadata sources given in precedence order; first non-empty wins.

    Args:
        *sources: SessionMetadata records, highest precedence first.

    Returns:
        A new SessionMetadata.
    """
    merged: Dict[str, str] = {}
    for source in sources:
        for name in METADATA_FIELDS:
            value = getattr(source, name)
            if value and name not in merged:
                merged[name] = value
    return SessionMetadata(**merged)


def extract_session_metadata(raw_text: str, rows: List[Row]) -> SessionMetadata:
    """
    Run all three extractors over an upload and merge them.

    Args:
        raw_text: Raw file content.
        rows: Tokenized rows of the same content.

    Returns:
        Merged SessionMetadata.
    """
    return merge_metadata(
        extract_scca_header_metadata(raw_text),
        extract_key_value_metadata(utils.split_lines(raw_text)),
        extract_row_metadata(rows),
    )
