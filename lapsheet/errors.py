"""
Parse Errors for Telemetry CSV Ingestion

Every failure the pipeline can report to an uploading user. All of them are
ValueErrors carrying a stable code, a message suitable for direct display, and
a short preview of the raw input lines for diagnosing malformed uploads.
"""

from typing import Dict, List, Optional


class LapsheetError(ValueError):
    """Base class for recoverable, user-facing parse failures."""

    code = "parse_error"

    def __init__(self, message: str, preview: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.preview = list(preview or [])

    def to_dict(self) -> Dict:
        return {
            "ok": False,
            "error": self.code,
            "message": self.message,
            "preview": self.preview,
        }


class EmptyInput(LapsheetError):
    code = "empty_input"

    def __init__(self, preview: Optional[List[str]] = None):
        super().__init__("The uploaded file is empty or contains no CSV rows.", preview)


class NoLapTimeColumnFound(LapsheetError):
    code = "no_lap_time_column"

    def __init__(self, headers: List[str], preview: Optional[List[str]] = None):
        shown = ", ".join(h for h in headers if h) or "(none)"
        super().__init__(
            "Could not find a lap time column. Expected a header such as "
            f"'Lap Time' or 'Time', or an SCCA 'Segment Times' line. Headers found: {shown}",
            preview,
        )
        self.headers = list(headers)


class NoDurationsExtracted(LapsheetError):
    code = "no_durations"

    def __init__(self, column: str, preview: Optional[List[str]] = None):
        super().__init__(
            f"Found lap times under '{column}' but none of them could be read "
            "as lap times. Use M:SS.mmm (e.g. 1:23.456) or seconds (e.g. 83.456).",
            preview,
        )
        self.column = column


class EmptyStatisticsInput(LapsheetError):
    code = "empty_statistics_input"

    def __init__(self, preview: Optional[List[str]] = None):
        super().__init__("No lap times were available to compute statistics.", preview)


class InputTooLarge(LapsheetError):
    code = "input_too_large"

    def __init__(self, size: int, limit: int, preview: Optional[List[str]] = None):
        super().__init__(
            f"The uploaded file is too large ({size} characters, limit {limit}).",
            preview,
        )
        self.size = size
        self.limit = limit
