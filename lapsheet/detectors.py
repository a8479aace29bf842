"""
Lap-Time Format Detection for Telemetry CSV Ingestion

This module locates lap-time values inside an upload. Two strategies exist:
the SCCA path scans raw lines for an annotated "Segment Times" record, and the
tabular path picks the most likely lap-time column from the header row.
"""

import logging
import re
from typing import List, Optional
from . import constants
from . import lap_times
from . import utils
from .tokenizer import Row

logger = logging.getLogger(__name__)


_SEGMENT_TOKEN = re.compile(r"\b\d{1,2}:\d{2}\.\d{1,3}\b", re.ASCII)


def extract_segment_times(raw_text: str) -> List[float]:
    """
    Extract lap durations from an SCCA "Segment Times" line.

    Scans raw lines (ignoring CSV quoting) for one containing "segment times"
    in any case, then pulls every M:SS.fff token out of it regardless of the
    delimiters around it. The first such line yielding at least
    MIN_SEGMENT_TIMES durations wins; durations are never merged across lines.

    Args:
        raw_text: Raw file content.

    Returns:
        Durations in order of appearance, or an empty list if no qualifying
        line exists.
    """
    for line_number, line in enumerate(utils.iter_lines(raw_text), start=1):
        if constants.SEGMENT_TIMES_MARKER not in line.lower():
            continue

        durations = []
        for token in _SEGMENT_TOKEN.findall(line):
            seconds = lap_times.parse_lap_time_to_seconds(token)
            if seconds is not None:
                durations.append(seconds)

        if len(durations) >= constants.MIN_SEGMENT_TIMES:
            logger.info("Found %d segment times on line %d", len(durations), line_number)
            return durations

        logger.debug("Segment times line %d held only %d durations", line_number, len(durations))

    return []


def has_segment_times_line(raw_text: str) -> bool:
    """Check whether any raw line carries the "segment times" marker."""
    return any(
        constants.SEGMENT_TIMES_MARKER in line.lower()
        for line in utils.iter_lines(raw_text)
    )


def find_lap_time_column(headers: Row) -> Optional[int]:
    """
    Find the index of the column most likely to hold lap times.

    Candidates are tried in priority order (laptime, lap time, lap_time, time,
    lap). For each candidate an exact header match is looked for first, then a
    header containing the candidate. The first hit is returned, so an exact
    "time" header loses to a "Best LapTime" header but beats a "Lap" header.

    Args:
        headers: The header row.

    Returns:
        Column index, or None if no header matches any candidate.
    """
    normalized = [header.lower().strip() for header in headers]

    for candidate in constants.LAP_TIME_COLUMN_CANDIDATES:
        for idx, header in enumerate(normalized):
            if header == candidate:
                return idx
        for idx, header in enumerate(normalized):
            if candidate in header:
                return idx

    return None


def extract_column_durations(rows: List[Row], column: int) -> List[float]:
    """
    Parse every data row's cell in the lap-time column.

    The first row is the header and is skipped. Rows too short to have the
    column and cells that are not lap times are skipped silently.

    Args:
        rows: Tokenized rows, header first.
        column: Index returned by find_lap_time_column().

    Returns:
        Durations in row order.
    """
    durations = []
    skipped = 0

    for row in rows[1:]:
        if column >= len(row):
            skipped += 1
            continue
        seconds = lap_times.parse_lap_time_to_seconds(row[column])
        if seconds is None:
            skipped += 1
            continue
        durations.append(seconds)

    if skipped:
        logger.debug("Skipped %d rows without a readable lap time in column %d", skipped, column)

    return durations
