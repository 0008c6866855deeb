"""
Foil analysis entry point.

Runs calibration, detection and statistics over one recording. This is a
pure function of its inputs; logging is left to the caller.
"""

from typing import Optional, Sequence

from core.calculations import (
    calculate_moving_time,
    calculate_percent_foil,
    count_runs,
    format_foil_minutes,
    total_foil_seconds,
)
from core.models.segment import AnalysisResult, FoilSegment, FoilStats
from core.segments.detector import (
    DEFAULT_PARAMS,
    FoilDetectionParams,
    calibrate_baseline,
    detect_foil_segments,
)
from core.streams import StreamBundle, TelemetryStreams, normalize_streams


def calculate_stats(segments: Sequence[FoilSegment], streams: TelemetryStreams,
                    params: FoilDetectionParams = DEFAULT_PARAMS) -> FoilStats:
    """
    Aggregate statistics for a list of detected flights.

    Args:
        segments: Detected flights
        streams: The streams the segment indices point into
        params: Thresholds for moving time and run grouping

    Returns:
        FoilStats
    """
    foil_seconds = total_foil_seconds(segments, streams.time)
    moving_seconds = calculate_moving_time(
        streams.time, streams.velocity, params.moving_speed_threshold
    )

    return FoilStats(
        total_foil_time=format_foil_minutes(foil_seconds),
        number_of_flights=len(segments),
        percent_foil=calculate_percent_foil(foil_seconds, moving_seconds),
        total_runs=count_runs(segments, streams.time, params.run_gap_seconds),
        total_foil_seconds=foil_seconds,
        moving_seconds=moving_seconds,
    )


def analyze(bundle: Optional[StreamBundle],
            params: Optional[FoilDetectionParams] = None) -> Optional[AnalysisResult]:
    """
    Detect foil flights in a recording and summarize them.

    Args:
        bundle: Stream bundle in keyed or array-of-records shape
        params: Detection thresholds, defaults if omitted

    Returns:
        AnalysisResult, or None when a required stream is missing or empty

    Raises:
        InvalidInputError: If the streams differ in length or are not numeric
        ValidationError: If params are out of range
    """
    params = (params or DEFAULT_PARAMS).validate()

    streams = normalize_streams(bundle)
    if streams is None:
        return None

    baseline = calibrate_baseline(streams.time, streams.altitude, params.calibration_window_seconds)
    segments = detect_foil_segments(
        streams.time, streams.velocity, streams.altitude, baseline, params
    )

    return AnalysisResult(
        baseline_altitude=baseline,
        foil_segments=tuple(segments),
        stats=calculate_stats(segments, streams, params),
        streams=streams,
    )
