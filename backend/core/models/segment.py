"""
Foil segment data models.

This module defines the data structures produced by foil-flight detection.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Tuple
import pandas as pd

from core.streams import TelemetryStreams


@dataclass(frozen=True)
class FoilSegment:
    """
    Represents one detected flight.

    A segment spans sample indices [start, end], both inclusive, over which
    the rider was continuously on foil.
    """
    start: int
    end: int

    def duration(self, time) -> float:
        """Elapsed seconds between the first and last sample of the segment."""
        return float(time[self.end] - time[self.start])

    @property
    def point_count(self) -> int:
        """Number of samples in this segment."""
        return self.end - self.start + 1

    def to_dict(self) -> Dict[str, int]:
        return {'start': self.start, 'end': self.end}


@dataclass(frozen=True)
class FoilStats:
    """Aggregate statistics for a session."""
    total_foil_time: str  # Minutes, one decimal
    number_of_flights: int
    percent_foil: str  # Percent of moving time, one decimal
    total_runs: int

    # Raw values behind the formatted fields
    total_foil_seconds: float = 0.0
    moving_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalFoilTime': self.total_foil_time,
            'numberOfFlights': self.number_of_flights,
            'percentFoil': self.percent_foil,
            'totalRuns': self.total_runs,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """
    Output of a foil analysis.

    Holds the calibrated baseline, the ordered flights, the aggregate
    statistics and the normalized input streams for charting.
    """
    baseline_altitude: float
    foil_segments: Tuple[FoilSegment, ...]
    stats: FoilStats
    streams: TelemetryStreams = field(repr=False)

    def to_dict(self) -> Dict[str, Any]:
        """Render the response shape consumed by the presentation layer."""
        return {
            'baselineAltitude': self.baseline_altitude,
            'foilSegments': [segment.to_dict() for segment in self.foil_segments],
            'stats': self.stats.to_dict(),
            'data': self.streams.to_dict(),
        }


def segments_to_dataframe(segments: List[FoilSegment],
                          streams: Optional[TelemetryStreams] = None) -> pd.DataFrame:
    """
    Convert a list of foil segments to a pandas DataFrame.

    When streams are given, time and speed columns are added per segment.

    Args:
        segments: List of FoilSegment objects
        streams: Optional streams the segment indices point into

    Returns:
        pandas DataFrame with one row per segment
    """
    if not segments:
        return pd.DataFrame()

    rows = []
    for segment in segments:
        row: Dict[str, Any] = segment.to_dict()
        row['point_count'] = segment.point_count
        if streams is not None:
            window = slice(segment.start, segment.end + 1)
            row['start_time'] = float(streams.time[segment.start])
            row['end_time'] = float(streams.time[segment.end])
            row['duration'] = segment.duration(streams.time)
            row['avg_speed_ms'] = float(streams.velocity[window].mean())
            row['max_speed_ms'] = float(streams.velocity[window].max())
            row['min_altitude'] = float(streams.altitude[window].min())
        rows.append(row)

    return pd.DataFrame(rows)


def dataframe_to_segments(df: pd.DataFrame) -> List[FoilSegment]:
    """
    Convert a pandas DataFrame to a list of FoilSegment objects.

    Args:
        df: DataFrame with 'start' and 'end' columns

    Returns:
        List of FoilSegment objects
    """
    return [FoilSegment(start=int(row['start']), end=int(row['end'])) for _, row in df.iterrows()]
