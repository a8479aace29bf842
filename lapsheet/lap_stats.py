"""
Lap Statistics for Telemetry CSV Ingestion

This module reduces a list of lap durations to best, average, population
standard deviation and a qualitative consistency label.
"""

import numpy as np
from typing import Sequence
from . import constants
from .errors import EmptyStatisticsInput
from .models import Consistency, LapStatistics


def classify_consistency(std_dev: float) -> Consistency:
    """
    Map a lap-time standard deviation to a consistency bucket.

    Thresholds (inclusive):
    - <= 0.15s: Very consistent
    - <= 0.35s: Moderately consistent
    - otherwise: Inconsistent
    """
    if std_dev <= constants.VERY_CONSISTENT_MAX_STD:
        return Consistency.VERY_CONSISTENT
    if std_dev <= constants.MODERATELY_CONSISTENT_MAX_STD:
        return Consistency.MODERATELY_CONSISTENT
    return Consistency.INCONSISTENT


def compute_stats(durations: Sequence[float]) -> LapStatistics:
    """
    Compute summary statistics for lap durations.

    The standard deviation is the population one (divisor N), so a single
    lap has a std-dev of 0.

    Args:
        durations: Lap durations in seconds.

    Returns:
        LapStatistics for the given laps.

    Raises:
        EmptyStatisticsInput: If durations is empty.
    """
    if len(durations) == 0:
        raise EmptyStatisticsInput()

    laps = np.asarray(durations, dtype=float)
    std_dev = float(np.std(laps, ddof=0))

    return LapStatistics(
        best=float(np.min(laps)),
        average=float(np.mean(laps)),
        std_dev=std_dev,
        consistency=classify_consistency(std_dev),
        sample_size=int(laps.size),
    )
