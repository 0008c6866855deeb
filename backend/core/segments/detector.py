"""
Foil segment detection algorithms.

This module contains the functions that find on-foil intervals in a
telemetry recording. Each function has a single responsibility and can be
tested independently:

1. calibrate_baseline - resting altitude from the start of the recording
2. is_candidate - per-sample speed and lift predicate
3. detect_foil_segments - forward scan with persistence and strict debounce

None of these functions keep state between calls.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy as np

from core.constants import (
    CALIBRATION_WINDOW_SECONDS,
    LIFT_THRESHOLD_METERS,
    MOVING_SPEED_THRESHOLD_MS,
    PERSISTENCE_SECONDS,
    PLANING_SPEED_MS,
    RUN_GAP_SECONDS,
)
from core.models.segment import FoilSegment
from core.validation import validate_detection_params


class LiftPolarity(str, Enum):
    """Which direction of altitude change away from baseline means lift."""
    DESCENDING = 'descending'  # Lower reading = more lift
    ASCENDING = 'ascending'


@dataclass(frozen=True)
class FoilDetectionParams:
    """Parameters for foil detection and session statistics."""
    planing_speed: float = PLANING_SPEED_MS
    lift_threshold: float = LIFT_THRESHOLD_METERS
    persistence_seconds: float = PERSISTENCE_SECONDS
    calibration_window_seconds: float = CALIBRATION_WINDOW_SECONDS
    moving_speed_threshold: float = MOVING_SPEED_THRESHOLD_MS
    run_gap_seconds: float = RUN_GAP_SECONDS
    lift_polarity: LiftPolarity = LiftPolarity.DESCENDING

    def validate(self) -> 'FoilDetectionParams':
        validate_detection_params(
            planing_speed=self.planing_speed,
            lift_threshold=self.lift_threshold,
            persistence_seconds=self.persistence_seconds,
            calibration_window_seconds=self.calibration_window_seconds,
            moving_speed_threshold=self.moving_speed_threshold,
            run_gap_seconds=self.run_gap_seconds,
        )
        return self

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            'planing_speed': self.planing_speed,
            'lift_threshold': self.lift_threshold,
            'persistence_seconds': self.persistence_seconds,
            'calibration_window_seconds': self.calibration_window_seconds,
            'moving_speed_threshold': self.moving_speed_threshold,
            'run_gap_seconds': self.run_gap_seconds,
            'lift_polarity': self.lift_polarity.value,
        }


DEFAULT_PARAMS = FoilDetectionParams()


def calibrate_baseline(time: np.ndarray, altitude: np.ndarray,
                       window_seconds: float = CALIBRATION_WINDOW_SECONDS) -> float:
    """
    Calculate the resting altitude used as the zero-reference for lift.

    The baseline is the mean altitude of the samples recorded within
    window_seconds of the first sample. The window ends at the first sample
    past it, so later samples that happen to share a timestamp are ignored.

    Args:
        time: Elapsed seconds, non-decreasing
        altitude: Altitude in meters
        window_seconds: Calibration window length

    Returns:
        Baseline altitude in meters
    """
    total = 0.0
    count = 0
    for t, alt in zip(time, altitude):
        if t - time[0] > window_seconds:
            break
        total += alt
        count += 1

    if count == 0:
        return float(altitude[0])
    return float(total / count)


def is_candidate(speed: float, altitude: float, baseline: float,
                 params: FoilDetectionParams = DEFAULT_PARAMS) -> bool:
    """
    Check whether a single sample looks like foiling.

    Speed alone is ambiguous (current and drift move a rider too), so the
    altitude must also sit beyond the baseline by the lift threshold.
    """
    if params.lift_polarity == LiftPolarity.ASCENDING:
        has_lift = altitude > baseline + params.lift_threshold
    else:
        has_lift = altitude < baseline - params.lift_threshold
    return bool(speed > params.planing_speed and has_lift)


def detect_foil_segments(time: np.ndarray,
                         velocity: np.ndarray,
                         altitude: np.ndarray,
                         baseline: float,
                         params: FoilDetectionParams = DEFAULT_PARAMS) -> List[FoilSegment]:
    """
    Scan the recording once and return the on-foil segments.

    A segment opens once the candidate predicate has held continuously for
    params.persistence_seconds and starts at the first sample of that
    candidate run. Any non-candidate sample closes an open segment and
    restarts the persistence timer, so short bursts never merge.

    Args:
        time: Elapsed seconds, non-decreasing
        velocity: Speed in m/s
        altitude: Altitude in meters
        baseline: Calibrated baseline altitude
        params: Detection thresholds

    Returns:
        Segments ordered by start index, non-overlapping
    """
    segments: List[FoilSegment] = []
    potential_start: Optional[int] = None
    segment_start: Optional[int] = None
    segment_end: Optional[int] = None

    for i in range(len(time)):
        if is_candidate(velocity[i], altitude[i], baseline, params):
            if potential_start is None:
                potential_start = i

            if time[i] - time[potential_start] >= params.persistence_seconds:
                if segment_start is None:
                    segment_start = potential_start
                segment_end = i
        else:
            if segment_start is not None:
                segments.append(FoilSegment(start=segment_start, end=segment_end))
                segment_start = None
                segment_end = None
            potential_start = None

    # Recording ended mid-flight
    if segment_start is not None:
        segments.append(FoilSegment(start=segment_start, end=segment_end))

    return segments
