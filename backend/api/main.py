"""
FastAPI backend for Foil Flight.

This provides REST API endpoints for foil-flight analysis of recorded
sessions, either from streams posted by the client or fetched from Strava.
"""

from fastapi import FastAPI, Body, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Dict, List, Optional, Any, Union
import logging
import sys
import os

# Add parent directory to path to import our modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import (
    APP_NAME, APP_VERSION, APP_DESCRIPTION, CORS_ORIGINS, LOGGING_CONFIG, FoilConfig, StravaConfig
)

# Initialize logging
logging.basicConfig(level=LOGGING_CONFIG["level"], format=LOGGING_CONFIG["format"])
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=f"{APP_NAME} API",
    description=APP_DESCRIPTION,
    version=APP_VERSION
)

# Add CORS middleware for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Import our services
from core.segments.detector import FoilDetectionParams, LiftPolarity
from core.validation import DETECTION_PARAM_RANGES, ValidationError
from services.foil_analysis_service import analyze_session, summarize_activity
from services.strava_service import StravaClient, StravaToken, StravaError


# Pydantic models for API responses
class FoilSegmentResponse(BaseModel):
    start: int
    end: int


class FoilStatsResponse(BaseModel):
    totalFoilTime: str
    numberOfFlights: int
    percentFoil: str
    totalRuns: int


class StreamDataResponse(BaseModel):
    velocity: List[float]
    altitude: List[float]
    time: List[float]


class AnalysisResponse(BaseModel):
    baselineAltitude: float
    foilSegments: List[FoilSegmentResponse]
    stats: FoilStatsResponse
    data: StreamDataResponse


class ActivityStatsResponse(BaseModel):
    topSpeed: float
    distance: float


class SessionSummaryResponse(BaseModel):
    activityId: Optional[int]
    name: Optional[str]
    activityStats: ActivityStatsResponse
    foilAnalysis: Optional[AnalysisResponse]


def build_params(
    planing_speed: float,
    lift_threshold: float,
    persistence_seconds: float,
    calibration_window_seconds: float,
    moving_speed_threshold: float,
    run_gap_seconds: float,
    lift_polarity: str
) -> FoilDetectionParams:
    """Build detection params from query values, mapping bad input to 422."""
    try:
        polarity = LiftPolarity(lift_polarity)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown lift polarity: {lift_polarity}")

    params = FoilDetectionParams(
        planing_speed=planing_speed,
        lift_threshold=lift_threshold,
        persistence_seconds=persistence_seconds,
        calibration_window_seconds=calibration_window_seconds,
        moving_speed_threshold=moving_speed_threshold,
        run_gap_seconds=run_gap_seconds,
        lift_polarity=polarity,
    )
    try:
        return params.validate()
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": f"{APP_NAME} API",
        "version": APP_VERSION,
        "endpoints": {
            "POST /api/analyze-streams": "Detect foil flights in posted telemetry streams",
            "GET /api/activities/{activity_id}/foil-analysis": "Analyze a Strava activity",
            "GET /api/config": "Detection defaults and ranges",
            "GET /api/health": "Health check endpoint"
        }
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "foil-flight-api"}


# UI slider step for each tunable parameter
RANGE_STEPS = {
    "planing_speed": 0.1,
    "lift_threshold": 0.05,
    "persistence_seconds": 0.5,
    "calibration_window_seconds": 1,
    "moving_speed_threshold": 0.1,
    "run_gap_seconds": 5,
}


@app.get("/api/config")
async def get_config():
    """Get default configuration values."""
    ranges: Dict[str, Any] = {
        name: {"min": low, "max": high, "step": RANGE_STEPS[name]}
        for name, (low, high) in DETECTION_PARAM_RANGES.items()
    }
    ranges["lift_polarity"] = [p.value for p in LiftPolarity]
    return {
        "defaults": FoilConfig.as_dict(),
        "ranges": ranges,
        "strava": StravaConfig.as_dict()
    }


@app.post("/api/analyze-streams", response_model=Optional[AnalysisResponse])
async def analyze_streams(
    streams: Union[Dict[str, Any], List[Dict[str, Any]]] = Body(...),
    planing_speed: float = FoilConfig.PLANING_SPEED,
    lift_threshold: float = FoilConfig.LIFT_THRESHOLD,
    persistence_seconds: float = FoilConfig.PERSISTENCE_SECONDS,
    calibration_window_seconds: float = FoilConfig.CALIBRATION_WINDOW,
    moving_speed_threshold: float = FoilConfig.MOVING_SPEED_THRESHOLD,
    run_gap_seconds: float = FoilConfig.RUN_GAP_SECONDS,
    lift_polarity: str = FoilConfig.LIFT_POLARITY
):
    """
    Detect foil flights in a telemetry stream bundle.

    Args:
        streams: Keyed-object or array-of-records stream bundle
        planing_speed: Minimum speed in m/s
        lift_threshold: Altitude margin from baseline in meters
        persistence_seconds: Continuous candidate time before a flight counts
        calibration_window_seconds: Baseline averaging window
        moving_speed_threshold: Speed counted as moving, m/s
        run_gap_seconds: Largest gap between flights of one run
        lift_polarity: 'descending' or 'ascending'

    Returns:
        Analysis result, or null when required streams are missing
    """
    params = build_params(
        planing_speed, lift_threshold, persistence_seconds, calibration_window_seconds,
        moving_speed_threshold, run_gap_seconds, lift_polarity
    )

    try:
        result = analyze_session(streams, params)
    except ValidationError as e:
        logger.error(f"Invalid telemetry streams: {str(e)}")
        raise HTTPException(status_code=422, detail=str(e))

    if result is None:
        return None
    return result.to_dict()


@app.get("/api/activities/{activity_id}/foil-analysis", response_model=SessionSummaryResponse)
async def analyze_activity(
    activity_id: int,
    authorization: Optional[str] = Header(None)
):
    """
    Fetch a Strava activity with its streams and analyze it.

    Args:
        activity_id: Strava activity id
        authorization: 'Bearer <access token>' header

    Returns:
        Session summary with coarse stats and the foil analysis (or null)
    """
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")

    client = StravaClient(token=StravaToken(access_token=authorization.split(" ", 1)[1].strip()))

    try:
        activity = client.get_activity(activity_id)
        streams = client.get_activity_streams(activity_id)
    except StravaError as e:
        logger.error(f"Error fetching activity {activity_id}: {str(e)}")
        raise HTTPException(status_code=502, detail=str(e))

    try:
        summary = summarize_activity(activity, streams)
    except ValidationError as e:
        logger.error(f"Invalid streams for activity {activity_id}: {str(e)}")
        raise HTTPException(status_code=422, detail=str(e))

    return summary.to_dict()


if __name__ == "__main__":
    import uvicorn
    from config.settings import API_HOST, API_PORT
    uvicorn.run(app, host=API_HOST, port=API_PORT)
