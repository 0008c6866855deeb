"""
Constants for the Foil Flight backend.

This module contains the algorithmic and domain-specific constants used by
foil-flight detection and session statistics. Constants are grouped by their
purpose and documented with their units where applicable.
"""

# =============================================================================
# CONVERSION FACTORS
# =============================================================================

# Speed conversions
METERS_PER_SECOND_TO_KNOTS = 1.94384  # 1 m/s = 1.94384 knots

# Distance and time conversions
METERS_PER_KILOMETER = 1000
SECONDS_PER_MINUTE = 60

# =============================================================================
# STREAM NAMES (activity-tracking API stream types)
# =============================================================================

TIME_STREAM = 'time'
VELOCITY_STREAM = 'velocity_smooth'
ALTITUDE_STREAM = 'altitude'
REQUIRED_STREAMS = (TIME_STREAM, VELOCITY_STREAM, ALTITUDE_STREAM)

# =============================================================================
# FOIL DETECTION THRESHOLDS
# =============================================================================

# Calibration
CALIBRATION_WINDOW_SECONDS = 10.0  # Baseline = mean altitude over first 10s

# Candidate predicate
PLANING_SPEED_MS = 0.8  # Minimum speed to be considered on foil
LIFT_THRESHOLD_METERS = 0.2  # Required altitude change away from baseline

# Hysteresis
PERSISTENCE_SECONDS = 2.0  # Candidate must hold continuously this long

# =============================================================================
# SESSION STATISTICS
# =============================================================================

MOVING_SPEED_THRESHOLD_MS = 0.5  # Pair average speed above this counts as moving
RUN_GAP_SECONDS = 30.0  # Segments closer than this (inclusive) share a run

# =============================================================================
# VALIDATION
# =============================================================================

assert MOVING_SPEED_THRESHOLD_MS < PLANING_SPEED_MS, \
    "Moving threshold must be below planing speed so foil time never exceeds moving time"
