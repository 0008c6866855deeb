"""
Foil analysis service.

This module provides the session analysis pipeline used by the API: it runs
foil detection on an activity's streams and, when that is not possible,
falls back to the coarse statistics the activity itself carries.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Any, Optional

from core.analysis import analyze
from core.calculations import meters_per_second_to_knots, meters_to_kilometers
from core.models.segment import AnalysisResult
from core.segments.detector import FoilDetectionParams, LiftPolarity
from core.streams import StreamBundle
from config.settings import FoilConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivityStats:
    """Coarse statistics reported by the activity-tracking service."""
    top_speed_knots: float
    distance_km: float

    def to_dict(self) -> Dict[str, float]:
        return {'topSpeed': self.top_speed_knots, 'distance': self.distance_km}


@dataclass(frozen=True)
class SessionSummary:
    """An activity's coarse stats plus the foil analysis, if one was possible."""
    activity_id: Optional[int]
    name: Optional[str]
    activity_stats: ActivityStats
    foil_analysis: Optional[AnalysisResult]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'activityId': self.activity_id,
            'name': self.name,
            'activityStats': self.activity_stats.to_dict(),
            'foilAnalysis': self.foil_analysis.to_dict() if self.foil_analysis else None,
        }


def default_params() -> FoilDetectionParams:
    """Detection parameters from application configuration."""
    return FoilDetectionParams(
        planing_speed=FoilConfig.PLANING_SPEED,
        lift_threshold=FoilConfig.LIFT_THRESHOLD,
        persistence_seconds=FoilConfig.PERSISTENCE_SECONDS,
        calibration_window_seconds=FoilConfig.CALIBRATION_WINDOW,
        moving_speed_threshold=FoilConfig.MOVING_SPEED_THRESHOLD,
        run_gap_seconds=FoilConfig.RUN_GAP_SECONDS,
        lift_polarity=LiftPolarity(FoilConfig.LIFT_POLARITY),
    )


def analyze_session(streams: Optional[StreamBundle],
                    params: Optional[FoilDetectionParams] = None) -> Optional[AnalysisResult]:
    """
    Run foil analysis on a session's streams.

    Args:
        streams: Stream bundle in either shape
        params: Detection parameters, configuration defaults if omitted

    Returns:
        AnalysisResult, or None when the required streams are unavailable

    Raises:
        ValidationError: If the streams are malformed or params out of range
    """
    if params is None:
        params = default_params()

    try:
        result = analyze(streams, params)
    except Exception as e:
        logger.error(f"Foil analysis failed: {e}")
        raise

    if result is None:
        logger.warning("No foil analysis available: required streams missing")
        return None

    logger.info(f"Foil analysis: {result.stats.number_of_flights} flights, "
                f"{result.stats.total_foil_time} min on foil, "
                f"{result.stats.total_runs} runs, baseline={result.baseline_altitude:.2f}m")
    return result


def legacy_activity_stats(max_speed_ms: Optional[float] = 0,
                          distance_m: Optional[float] = 0) -> ActivityStats:
    """
    Coarse stats from the activity summary.

    Args:
        max_speed_ms: Activity max speed in m/s
        distance_m: Activity distance in meters

    Returns:
        ActivityStats with top speed in knots and distance in km
    """
    return ActivityStats(
        top_speed_knots=meters_per_second_to_knots(max_speed_ms or 0),
        distance_km=meters_to_kilometers(distance_m or 0),
    )


def summarize_activity(activity: Dict[str, Any],
                       streams: Optional[StreamBundle],
                       params: Optional[FoilDetectionParams] = None) -> SessionSummary:
    """
    Build the session summary for an activity.

    The coarse stats are always present so callers can degrade gracefully
    when foil analysis is not possible.
    """
    return SessionSummary(
        activity_id=activity.get('id'),
        name=activity.get('name'),
        activity_stats=legacy_activity_stats(activity.get('max_speed'), activity.get('distance')),
        foil_analysis=analyze_session(streams, params),
    )
