"""
Lap-Time Parsing for Telemetry CSV Ingestion

This module converts single textual tokens into lap durations in seconds and
formats durations back to M:SS.mmm. Telemetry exports often put wall-clock
timestamps next to lap durations, so anything that looks like a date, a
datetime or a time of day is rejected rather than read as a very long lap.
"""

import logging
import math
import re
from typing import Optional
from . import constants
from . import utils

logger = logging.getLogger(__name__)


_TIMESTAMP_GUARDS = [
    re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII),          # ISO date
    re.compile(r"\d{1,2}/\d{1,2}/\d{2,4}", re.ASCII),    # US date
    re.compile(r"[Tt]\d{2}:\d{2}:\d{2}", re.ASCII),      # ISO datetime separator
    re.compile(r"[+-]\d{2}:\d{2}$", re.ASCII),           # UTC offset
]

_MINUTES_SECONDS = re.compile(r"^(\d+):(\d{1,2})\.?(\d*)$", re.ASCII)
_HOURS_MINUTES_SECONDS = re.compile(r"^(\d+):(\d{2}):(\d{2})\.?(\d*)$", re.ASCII)
_DECIMAL_SECONDS = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)$", re.ASCII)


def looks_like_timestamp(token: str) -> bool:
    """
    Check whether a token looks like a date, datetime or UTC-qualified time.

    Args:
        token: Trimmed token.

    Returns:
        True if any of the date/datetime guards match.
    """
    if "Z" in token:
        return True
    return any(pattern.search(token) for pattern in _TIMESTAMP_GUARDS)


def _fraction(digits: str) -> float:
    return float("0." + digits) if digits else 0.0


def parse_lap_time_to_seconds(value) -> Optional[float]:
    """
    Parse a lap-time token into seconds.

    Accepted forms, tried in order:
    - M:SS[.fff] / MM:SS[.fff] with minutes < 60 and seconds < 60
    - H:MM:SS[.fff] with hours <= 1 (larger hours mean a time of day)
    - plain decimal seconds with 0 < value < 3600

    Every accepted value is positive and at most MAX_LAP_SECONDS.

    Args:
        value: Raw token, usually one CSV cell.

    Returns:
        Duration in seconds, or None if the token is not a lap time.
    """
    if not isinstance(value, str):
        return None

    token = value.strip()
    if not token:
        return None

    if looks_like_timestamp(token):
        logger.debug("Rejected timestamp-like token %r", token)
        return None

    match = _MINUTES_SECONDS.match(token)
    if match:
        minutes = int(match.group(1))
        seconds = int(match.group(2))
        if seconds >= 60 or minutes >= 60:
            return None
        total = minutes * 60 + seconds + _fraction(match.group(3))
        if total <= 0 or total > constants.MAX_LAP_SECONDS:
            return None
        return total

    match = _HOURS_MINUTES_SECONDS.match(token)
    if match:
        hours = int(match.group(1))
        minutes = int(match.group(2))
        seconds = int(match.group(3))
        if hours > 1 or minutes >= 60 or seconds >= 60:
            return None
        total = hours * 3600 + minutes * 60 + seconds + _fraction(match.group(4))
        if total <= 0 or total > constants.MAX_LAP_SECONDS:
            return None
        return total

    if not _DECIMAL_SECONDS.match(token):
        return None

    seconds_only = utils.safe_float(token)
    if math.isnan(seconds_only) or not 0 < seconds_only < constants.MAX_LAP_SECONDS:
        return None
    return seconds_only


def format_lap_time(seconds: float) -> str:
    """
    Format a duration in seconds as M:SS.mmm.

    Rounding to the millisecond is done on the whole value first so that
    e.g. 59.9996 renders as 1:00.000 rather than 0:59.1000.

    Args:
        seconds: Duration in seconds (non-negative).

    Returns:
        Formatted lap time string.
    """
    total_ms = int(round(seconds * 1000))
    minutes, remainder = divmod(total_ms, 60000)
    whole_seconds, millis = divmod(remainder, 1000)
    return f"{minutes}:{whole_seconds:02d}.{millis:03d}"
