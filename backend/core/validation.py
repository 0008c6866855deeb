"""
Input validation utilities for core functions.

This module provides validation functions to ensure telemetry streams and
detection parameters are usable before the segmentation engine runs.
"""

import numpy as np
import logging
from typing import Dict, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Custom exception for validation errors."""
    pass


class InvalidInputError(ValidationError):
    """Raised when telemetry streams are present but malformed."""
    pass


def validate_stream_lengths(time: Sequence, velocity: Sequence, altitude: Sequence,
                            context: str = "Telemetry streams") -> int:
    """
    Validate that the three telemetry streams are index-aligned.

    Args:
        time: Elapsed seconds stream
        velocity: Speed stream (m/s)
        altitude: Altitude stream (m)
        context: Context description for error messages

    Returns:
        The common stream length

    Raises:
        InvalidInputError: If the streams differ in length
    """
    lengths = (len(time), len(velocity), len(altitude))
    if len(set(lengths)) != 1:
        raise InvalidInputError(
            f"{context}: length mismatch (time={lengths[0]}, "
            f"velocity={lengths[1]}, altitude={lengths[2]})"
        )
    return lengths[0]


def validate_numeric_stream(values: Sequence, name: str) -> np.ndarray:
    """
    Convert a stream to a float array, rejecting non-numeric or non-finite data.

    Args:
        values: Raw stream values
        name: Stream name for error messages

    Returns:
        1-D float numpy array

    Raises:
        InvalidInputError: If the values cannot be used as numbers
    """
    try:
        array = np.asarray(values, dtype=float)
    except (ValueError, TypeError) as e:
        raise InvalidInputError(f"Stream '{name}' contains non-numeric values") from e

    if array.ndim != 1:
        raise InvalidInputError(f"Stream '{name}' must be one-dimensional, got shape {array.shape}")

    if not np.isfinite(array).all():
        bad_count = int((~np.isfinite(array)).sum())
        raise InvalidInputError(f"Stream '{name}' contains {bad_count} NaN/inf values")

    return array


# Accepted (min, max) for each detection parameter; /api/config advertises these
DETECTION_PARAM_RANGES: Dict[str, Tuple[float, float]] = {
    'planing_speed': (0.0, 50.0),  # m/s, far beyond any foil
    'lift_threshold': (0.0, 10.0),  # m
    'persistence_seconds': (0.0, 600.0),
    'calibration_window_seconds': (0.0, 600.0),
    'moving_speed_threshold': (0.0, 50.0),  # m/s
    'run_gap_seconds': (0.0, 3600.0),  # 1 hour max
}


def validate_detection_params(
    planing_speed: Optional[float] = None,
    lift_threshold: Optional[float] = None,
    persistence_seconds: Optional[float] = None,
    calibration_window_seconds: Optional[float] = None,
    moving_speed_threshold: Optional[float] = None,
    run_gap_seconds: Optional[float] = None
) -> None:
    """
    Validate parameter ranges for foil detection.

    The moving-speed threshold may not exceed the planing speed, so every
    sample pair inside a flight also counts as moving time.

    Args:
        planing_speed: Minimum speed in m/s
        lift_threshold: Altitude margin in meters
        persistence_seconds: Minimum continuous candidate duration
        calibration_window_seconds: Baseline averaging window
        moving_speed_threshold: Moving-time speed threshold in m/s
        run_gap_seconds: Maximum gap between flights of one run

    Raises:
        ValidationError: If any parameter is out of valid range
    """
    values = {
        'planing_speed': planing_speed,
        'lift_threshold': lift_threshold,
        'persistence_seconds': persistence_seconds,
        'calibration_window_seconds': calibration_window_seconds,
        'moving_speed_threshold': moving_speed_threshold,
        'run_gap_seconds': run_gap_seconds,
    }
    for name, value in values.items():
        if value is None:
            continue
        low, high = DETECTION_PARAM_RANGES[name]
        if not low <= value <= high:
            label = name.replace('_', ' ').capitalize()
            raise ValidationError(f"{label} must be {low:g}-{high:g}, got {value}")

    if planing_speed is not None and moving_speed_threshold is not None:
        if moving_speed_threshold > planing_speed:
            raise ValidationError(
                f"Moving speed threshold ({moving_speed_threshold} m/s) must not exceed "
                f"planing speed ({planing_speed} m/s)"
            )
