"""
Shared calculations module.

Session statistics derived from detected foil segments and the raw
telemetry streams. Every function is a read-only computation so each
statistic can be tested on its own.
"""

import numpy as np
from typing import List, Sequence

from core.constants import (
    METERS_PER_SECOND_TO_KNOTS, METERS_PER_KILOMETER,
    MOVING_SPEED_THRESHOLD_MS, RUN_GAP_SECONDS, SECONDS_PER_MINUTE
)
from core.models.segment import FoilSegment


# =============================================================================
# UNIT CONVERSIONS
# =============================================================================

def meters_per_second_to_knots(speed_ms: float) -> float:
    """Convert speed from m/s to knots."""
    return speed_ms * METERS_PER_SECOND_TO_KNOTS


def meters_to_kilometers(distance_m: float) -> float:
    """Convert distance from meters to kilometers."""
    return distance_m / METERS_PER_KILOMETER


# =============================================================================
# FOIL TIME
# =============================================================================

def total_foil_seconds(segments: Sequence[FoilSegment], time: np.ndarray) -> float:
    """Sum of segment durations in seconds."""
    return float(sum(segment.duration(time) for segment in segments))


def format_foil_minutes(foil_seconds: float) -> str:
    """Format foil time as minutes with one decimal, e.g. '12.3'."""
    return f"{foil_seconds / SECONDS_PER_MINUTE:.1f}"


# =============================================================================
# MOVING TIME
# =============================================================================

def calculate_moving_time(time: np.ndarray, velocity: np.ndarray,
                          speed_threshold: float = MOVING_SPEED_THRESHOLD_MS) -> float:
    """
    Calculate time spent moving.

    A pair of consecutive samples counts as moving when their average speed
    exceeds speed_threshold; the pair then contributes its time delta.

    Args:
        time: Elapsed seconds
        velocity: Speed in m/s
        speed_threshold: Minimum pair-average speed in m/s

    Returns:
        Moving time in seconds (0.0 for fewer than two samples)
    """
    time = np.asarray(time, dtype=float)
    velocity = np.asarray(velocity, dtype=float)
    if len(time) < 2:
        return 0.0

    pair_speed = (velocity[1:] + velocity[:-1]) / 2
    deltas = np.diff(time)
    return float(deltas[pair_speed > speed_threshold].sum())


def calculate_percent_foil(foil_seconds: float, moving_seconds: float) -> str:
    """
    Percentage of moving time spent on foil, one decimal.

    Returns '0' when there is no moving time.
    """
    if moving_seconds <= 0:
        return "0"
    return f"{foil_seconds / moving_seconds * 100:.1f}"


# =============================================================================
# RUNS
# =============================================================================

def group_runs(segments: Sequence[FoilSegment], time: np.ndarray,
               max_gap_seconds: float = RUN_GAP_SECONDS) -> List[List[FoilSegment]]:
    """
    Group consecutive flights into runs.

    Flights whose gap (next start minus previous end, in seconds) is at
    most max_gap_seconds belong to the same run.

    Args:
        segments: Flights ordered by start index
        time: Elapsed seconds the segment indices point into
        max_gap_seconds: Largest gap tolerated inside a run

    Returns:
        List of runs, each a non-empty list of segments
    """
    runs: List[List[FoilSegment]] = []
    for segment in segments:
        if runs:
            gap = time[segment.start] - time[runs[-1][-1].end]
            if gap <= max_gap_seconds:
                runs[-1].append(segment)
                continue
        runs.append([segment])
    return runs


def count_runs(segments: Sequence[FoilSegment], time: np.ndarray,
               max_gap_seconds: float = RUN_GAP_SECONDS) -> int:
    """Number of runs, 0 when there are no segments."""
    return len(group_runs(segments, time, max_gap_seconds))
