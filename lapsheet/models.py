"""
Data Structures for Telemetry CSV Ingestion

Transient value types produced by a single parse call. All durations are in
seconds.
"""

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Dict, List, Optional
from . import utils


METADATA_FIELDS = ("driver_name", "car", "track", "session_type", "conditions")


class Consistency(str, Enum):
    """Qualitative bucket derived from the population std-dev of lap times."""
    VERY_CONSISTENT = "Very consistent"
    MODERATELY_CONSISTENT = "Moderately consistent"
    INCONSISTENT = "Inconsistent"


class SourceFormat(str, Enum):
    SCCA = "scca"
    COLUMN = "column"


@dataclass
class SessionMetadata:
    """
    Session descriptors recovered from an upload.

    Each field is either None or a non-empty trimmed string.
    """
    driver_name: Optional[str] = None
    car: Optional[str] = None
    track: Optional[str] = None
    session_type: Optional[str] = None
    conditions: Optional[str] = None

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                value = str(value).strip()
                setattr(self, f.name, value or None)

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in METADATA_FIELDS)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)


@dataclass
class LapStatistics:
    """
    Summary statistics over a non-empty list of lap durations.

    Attributes:
        best: Fastest lap in seconds.
        average: Arithmetic mean in seconds.
        std_dev: Population standard deviation (divisor N) in seconds.
        consistency: Bucket from the std-dev thresholds.
        sample_size: Number of laps, at least 1.
    """
    best: float
    average: float
    std_dev: float
    consistency: Consistency
    sample_size: int

    def to_dict(self) -> Dict:
        return {
            "best": utils.round_float(self.best),
            "average": utils.round_float(self.average),
            "std_dev": utils.round_float(self.std_dev),
            "consistency": self.consistency.value,
            "sample_size": self.sample_size,
        }


@dataclass
class ParseResult:
    """Successful outcome of parsing one upload."""
    format: SourceFormat
    durations: List[float]
    metadata: SessionMetadata
    statistics: LapStatistics
    lap_column: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "ok": True,
            "format": self.format.value,
            "lap_column": self.lap_column,
            "durations": [utils.round_float(d) for d in self.durations],
            "metadata": self.metadata.to_dict(),
            "statistics": self.statistics.to_dict(),
        }
