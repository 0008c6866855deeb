"""
Application settings and configuration.

This module contains application-specific configuration and defaults.
For algorithmic constants, see core.constants module.
"""

import os
import logging
from typing import Dict, Any

# Import algorithmic constants from core module
from core.constants import (
    CALIBRATION_WINDOW_SECONDS,
    LIFT_THRESHOLD_METERS,
    MOVING_SPEED_THRESHOLD_MS,
    PERSISTENCE_SECONDS,
    PLANING_SPEED_MS,
    RUN_GAP_SECONDS,
)
from core.segments.detector import LiftPolarity


def lift_polarity_from_env() -> str:
    """Read FOIL_LIFT_POLARITY, failing at startup on an unknown value."""
    value = os.environ.get("FOIL_LIFT_POLARITY", LiftPolarity.DESCENDING.value).strip().lower()
    allowed = [p.value for p in LiftPolarity]
    if value not in allowed:
        raise ValueError(f"FOIL_LIFT_POLARITY must be one of {allowed}, got {value!r}")
    return value


# App information
APP_NAME = "Foil Flight"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "Detect foil flights in recorded wingfoil sessions"

# Foil detection defaults (reference core constants)
DEFAULT_PLANING_SPEED = PLANING_SPEED_MS
DEFAULT_LIFT_THRESHOLD = LIFT_THRESHOLD_METERS
DEFAULT_PERSISTENCE_SECONDS = PERSISTENCE_SECONDS
DEFAULT_CALIBRATION_WINDOW = CALIBRATION_WINDOW_SECONDS
DEFAULT_MOVING_SPEED_THRESHOLD = MOVING_SPEED_THRESHOLD_MS
DEFAULT_RUN_GAP_SECONDS = RUN_GAP_SECONDS
DEFAULT_LIFT_POLARITY = lift_polarity_from_env()

# Activity-tracking (Strava) integration
STRAVA_CLIENT_ID = os.environ.get("STRAVA_CLIENT_ID", "")
STRAVA_CLIENT_SECRET = os.environ.get("STRAVA_CLIENT_SECRET", "")
STRAVA_API_URL = "https://www.strava.com/api/v3"
STRAVA_OAUTH_URL = "https://www.strava.com/oauth"
STRAVA_SCOPE = "read,activity:read_all"
STRAVA_ACTIVITIES_PER_PAGE = 10
STRAVA_REQUEST_TIMEOUT = 15  # Seconds

# API configuration
CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",  # Vite dev server
]
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))

# Logging configuration
LOGGING_CONFIG = {
    "level": logging.INFO,
    "format": '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
}


# =============== Configuration Classes ===============
# These classes provide typed access to configuration sections

class FoilConfig:
    """Configuration parameters for foil detection and session statistics."""
    PLANING_SPEED = DEFAULT_PLANING_SPEED
    LIFT_THRESHOLD = DEFAULT_LIFT_THRESHOLD
    PERSISTENCE_SECONDS = DEFAULT_PERSISTENCE_SECONDS
    CALIBRATION_WINDOW = DEFAULT_CALIBRATION_WINDOW
    MOVING_SPEED_THRESHOLD = DEFAULT_MOVING_SPEED_THRESHOLD
    RUN_GAP_SECONDS = DEFAULT_RUN_GAP_SECONDS
    LIFT_POLARITY = DEFAULT_LIFT_POLARITY

    @classmethod
    def as_dict(cls) -> Dict[str, Any]:
        """Get foil configuration as a dictionary."""
        return {
            'planing_speed': cls.PLANING_SPEED,
            'lift_threshold': cls.LIFT_THRESHOLD,
            'persistence_seconds': cls.PERSISTENCE_SECONDS,
            'calibration_window_seconds': cls.CALIBRATION_WINDOW,
            'moving_speed_threshold': cls.MOVING_SPEED_THRESHOLD,
            'run_gap_seconds': cls.RUN_GAP_SECONDS,
            'lift_polarity': cls.LIFT_POLARITY,
        }


class StravaConfig:
    """Configuration parameters for the Strava integration."""
    CLIENT_ID = STRAVA_CLIENT_ID
    CLIENT_SECRET = STRAVA_CLIENT_SECRET
    API_URL = STRAVA_API_URL
    OAUTH_URL = STRAVA_OAUTH_URL
    SCOPE = STRAVA_SCOPE
    ACTIVITIES_PER_PAGE = STRAVA_ACTIVITIES_PER_PAGE
    REQUEST_TIMEOUT = STRAVA_REQUEST_TIMEOUT

    @classmethod
    def as_dict(cls) -> Dict[str, Any]:
        """Get Strava configuration as a dictionary (secret omitted)."""
        return {
            'client_id': cls.CLIENT_ID,
            'api_url': cls.API_URL,
            'oauth_url': cls.OAUTH_URL,
            'scope': cls.SCOPE,
            'activities_per_page': cls.ACTIVITIES_PER_PAGE,
            'request_timeout': cls.REQUEST_TIMEOUT,
        }
