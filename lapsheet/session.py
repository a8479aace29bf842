"""
Session Builder for Telemetry CSV Ingestion

This module orchestrates the ingestion pipeline, combining format detection,
lap-time parsing, metadata extraction and statistics into one result for an
uploaded file.
"""

import logging
from typing import Dict
from . import constants
from . import detectors
from . import lap_stats
from . import metadata
from . import tokenizer
from . import utils
from .errors import (
    EmptyInput,
    InputTooLarge,
    LapsheetError,
    NoDurationsExtracted,
    NoLapTimeColumnFound,
)
from .models import ParseResult, SourceFormat

logger = logging.getLogger(__name__)


def build_session_payload(text: str) -> ParseResult:
    """
    Parse an uploaded telemetry file into lap statistics and metadata.

    Main entry point of the pipeline:
    1. Rejects oversized or blank input
    2. Tries the SCCA "Segment Times" line
    3. Falls back to tokenizing and picking the lap-time column
    4. Computes lap statistics
    5. Extracts and merges session metadata

    Args:
        text: Raw file content.

    Returns:
        ParseResult with the durations, statistics and metadata.

    Raises:
        InputTooLarge: If text exceeds MAX_INPUT_CHARS.
        EmptyInput: If the text is blank or yields no rows.
        NoLapTimeColumnFound: If neither format is recognised.
        NoDurationsExtracted: If the lap-time column or the "Segment Times"
            line holds no readable lap times.
    """
    if len(text) > constants.MAX_INPUT_CHARS:
        raise InputTooLarge(len(text), constants.MAX_INPUT_CHARS, utils.build_preview(text))

    preview = utils.build_preview(text)

    if not text.strip():
        raise EmptyInput(preview)

    rows = tokenizer.parse_csv(text)
    durations = detectors.extract_segment_times(text)

    if len(durations) >= constants.MIN_SEGMENT_TIMES:
        source_format = SourceFormat.SCCA
        lap_column = None
    else:
        if not rows:
            raise EmptyInput(preview)

        headers = tokenizer.header_row(rows)
        column = detectors.find_lap_time_column(headers)
        if column is None:
            if detectors.has_segment_times_line(text):
                raise NoDurationsExtracted(constants.SEGMENT_TIMES_LABEL, preview)
            raise NoLapTimeColumnFound(headers, preview)

        lap_column = headers[column]
        logger.info("Using column %d (%r) for lap times", column, lap_column)

        durations = detectors.extract_column_durations(rows, column)
        if not durations:
            raise NoDurationsExtracted(lap_column, preview)
        source_format = SourceFormat.COLUMN

    statistics = lap_stats.compute_stats(durations)
    session_metadata = metadata.extract_session_metadata(text, rows)

    logger.info(
        "Parsed %d laps from %s upload (best %.3fs, %s)",
        statistics.sample_size, source_format.value, statistics.best,
        statistics.consistency.value,
    )

    return ParseResult(
        format=source_format,
        durations=durations,
        metadata=session_metadata,
        statistics=statistics,
        lap_column=lap_column,
    )


def parse_upload(text: str) -> Dict:
    """
    Parse an upload and return a JSON-serialisable result.

    Every parse failure is converted into a failure dict carrying the error
    code, a user-facing message and a raw-line preview; nothing is raised.

    Args:
        text: Raw file content.

    Returns:
        ParseResult.to_dict() on success, or
        {"ok": False, "error", "message", "preview"} on failure.
    """
    try:
        return build_session_payload(text).to_dict()
    except LapsheetError as exc:
        if not exc.preview:
            exc.preview = utils.build_preview(text)
        logger.warning("Upload rejected (%s): %s", exc.code, exc.message)
        return exc.to_dict()
