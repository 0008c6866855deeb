"""
Telemetry stream normalization.

The activity-tracking API returns streams either keyed by type
(``key_by_type=true``) or as a list of typed records. This module turns both
shapes into a single TelemetryStreams struct before any analysis runs.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

import numpy as np

from core.constants import ALTITUDE_STREAM, REQUIRED_STREAMS, TIME_STREAM, VELOCITY_STREAM
from core.validation import validate_numeric_stream, validate_stream_lengths

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class TelemetryStreams:
    """Index-aligned elapsed time (s), speed (m/s) and altitude (m) arrays."""
    time: np.ndarray
    velocity: np.ndarray
    altitude: np.ndarray

    def __len__(self) -> int:
        return len(self.time)

    def to_dict(self) -> Dict[str, List[float]]:
        """Plain lists for JSON responses and charting."""
        return {
            'velocity': self.velocity.tolist(),
            'altitude': self.altitude.tolist(),
            'time': self.time.tolist(),
        }


StreamBundle = Union[TelemetryStreams, Mapping[str, Any], List[Mapping[str, Any]]]


def _stream_data(record: Any) -> Optional[Any]:
    """Return the 'data' payload of a stream record, if any."""
    if isinstance(record, Mapping):
        return record.get('data')
    return None


def _extract_keyed(bundle: Mapping[str, Any]) -> Dict[str, Any]:
    return {name: _stream_data(bundle.get(name)) for name in REQUIRED_STREAMS}


def _extract_records(bundle: List[Any]) -> Dict[str, Any]:
    found: Dict[str, Any] = {name: None for name in REQUIRED_STREAMS}
    for record in bundle:
        if not isinstance(record, Mapping):
            continue
        stream_type = record.get('type')
        # First record of each type wins
        if stream_type in found and found[stream_type] is None:
            found[stream_type] = record.get('data')
    return found


def normalize_streams(bundle: Optional[StreamBundle]) -> Optional[TelemetryStreams]:
    """
    Normalize a stream bundle into TelemetryStreams.

    Args:
        bundle: Keyed-object bundle, array-of-records bundle, or TelemetryStreams

    Returns:
        TelemetryStreams, or None if any required stream is missing or empty

    Raises:
        InvalidInputError: If the streams are present but differ in length
            or contain non-numeric values
    """
    if bundle is None:
        return None

    if isinstance(bundle, TelemetryStreams):
        extracted = {
            TIME_STREAM: bundle.time,
            VELOCITY_STREAM: bundle.velocity,
            ALTITUDE_STREAM: bundle.altitude,
        }
    elif isinstance(bundle, Mapping):
        extracted = _extract_keyed(bundle)
    elif isinstance(bundle, (list, tuple)):
        extracted = _extract_records(list(bundle))
    else:
        logger.warning(f"Unsupported stream bundle type: {type(bundle).__name__}")
        return None

    missing = [
        name for name, data in extracted.items()
        if data is None or (hasattr(data, '__len__') and len(data) == 0)
    ]
    if missing:
        logger.warning(f"Missing required streams for foil analysis: {missing}")
        return None

    arrays = {name: validate_numeric_stream(data, name) for name, data in extracted.items()}
    validate_stream_lengths(arrays[TIME_STREAM], arrays[VELOCITY_STREAM], arrays[ALTITUDE_STREAM])

    streams = TelemetryStreams(
        time=arrays[TIME_STREAM],
        velocity=arrays[VELOCITY_STREAM],
        altitude=arrays[ALTITUDE_STREAM],
    )
    logger.debug(f"Normalized {len(streams)} telemetry samples")
    return streams
