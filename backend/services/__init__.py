"""
Services package.

Provides business logic layer between API and core algorithms.

Modules:
    foil_analysis_service: Foil analysis pipeline and fallback session stats
    strava_service: Strava OAuth and activity/stream retrieval
"""

from services.foil_analysis_service import (
    analyze_session,
    summarize_activity,
    legacy_activity_stats,
    SessionSummary,
)
from services.strava_service import StravaClient, StravaToken, StravaError

__all__ = [
    'analyze_session',
    'summarize_activity',
    'legacy_activity_stats',
    'SessionSummary',
    'StravaClient',
    'StravaToken',
    'StravaError',
]
