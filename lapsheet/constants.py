"""
Constants for Telemetry CSV Ingestion

This module defines the thresholds, candidate names and limits used throughout
the lap-time ingestion pipeline.
"""

# Lap durations are accepted only within (0, MAX_LAP_SECONDS]
MAX_LAP_SECONDS = 3600.0

# Header names searched for the lap-time column, highest priority first
LAP_TIME_COLUMN_CANDIDATES = ["laptime", "lap time", "lap_time", "time", "lap"]

# SCCA exports annotate the line holding every segment duration with this marker
SEGMENT_TIMES_MARKER = "segment times"
SEGMENT_TIMES_LABEL = "Segment Times"
MIN_SEGMENT_TIMES = 2

# Row-scanned metadata only looks at the top of the file
METADATA_SCAN_ROWS = 30

# Population std-dev thresholds (seconds) for the consistency label
VERY_CONSISTENT_MAX_STD = 0.15
MODERATELY_CONSISTENT_MAX_STD = 0.35

# Upper bound on characters handed to the parser
MAX_INPUT_CHARS = 2 * 1024 * 1024

# Raw-line preview attached to parse failures
PREVIEW_LINES = 5
PREVIEW_LINE_CHARS = 120

# Web layer defaults (overridable through the environment)
MAX_UPLOAD_BYTES = 4 * 1024 * 1024
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_SESSION_TYPE = "Practice"
