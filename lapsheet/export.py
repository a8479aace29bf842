"""
Export Functions for Telemetry CSV Ingestion

This module turns a parse result into a downloadable lap table and into the
field values that prefill the session report form.
"""

import csv
import io
from typing import Dict
from . import constants
from . import utils
from .lap_times import format_lap_time
from .models import ParseResult


def export_laps_csv(result: ParseResult) -> str:
    """
    Export the parsed laps to CSV format.

    Args:
        result: ParseResult from build_session_payload().

    Returns:
        CSV string with one row per lap: lap number, seconds, formatted time
        and delta to the best lap.
    """
    best = result.statistics.best

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    writer.writerow(["lap_number", "lap_time_s", "lap_time", "delta_to_best_s"])

    for lap_number, seconds in enumerate(result.durations, start=1):
        writer.writerow([
            lap_number,
            utils.round_float(seconds),
            format_lap_time(seconds),
            utils.round_float(seconds - best),
        ])

    return buffer.getvalue()


def describe_consistency(result: ParseResult) -> str:
    """Describe lap-time consistency, e.g. "Very consistent (std dev 0.120s over 8 laps)"."""
    stats = result.statistics
    laps = "lap" if stats.sample_size == 1 else "laps"
    return f"{stats.consistency.value} (std dev {stats.std_dev:.3f}s over {stats.sample_size} {laps})"


def build_session_form(result: ParseResult) -> Dict[str, str]:
    """
    Build the values that prefill the session report form.

    Metadata fields that were not found are left blank, except session_type
    which falls back to DEFAULT_SESSION_TYPE. driver_notes is always blank.

    Args:
        result: ParseResult from build_session_payload().

    Returns:
        Dictionary with driver_name, car, track, session_type, conditions,
        best_lap, avg_lap, consistency and driver_notes.
    """
    meta = result.metadata
    return {
        "driver_name": meta.driver_name or "",
        "car": meta.car or "",
        "track": meta.track or "",
        "session_type": meta.session_type or constants.DEFAULT_SESSION_TYPE,
        "conditions": meta.conditions or "",
        "best_lap": format_lap_time(result.statistics.best),
        "avg_lap": format_lap_time(result.statistics.average),
        "consistency": describe_consistency(result),
        "driver_notes": "",
    }
