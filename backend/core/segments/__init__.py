"""
Segments package.

This package contains functionality for foil segment detection.
Clean, focused interface with no circular dependencies.
"""

# Core segment detection functions
from .detector import (
    LiftPolarity,
    FoilDetectionParams,
    DEFAULT_PARAMS,
    calibrate_baseline,
    is_candidate,
    detect_foil_segments,
)

# Segment models
from core.models.segment import FoilSegment, segments_to_dataframe, dataframe_to_segments

__all__ = [
    # Parameters
    'LiftPolarity',
    'FoilDetectionParams',
    'DEFAULT_PARAMS',

    # Detection steps
    'calibrate_baseline',
    'is_candidate',
    'detect_foil_segments',

    # Models
    'FoilSegment',
    'segments_to_dataframe',
    'dataframe_to_segments',
]
