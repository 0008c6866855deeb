"""
Synthetic telemetry builders shared by the tests.
"""

from typing import Any, Dict, Iterable, List


def build_session(n: int, foil_indices: Iterable[int], dt: float = 1.0,
                  rest_alt: float = 5.0, foil_alt: float = 4.0,
                  rest_speed: float = 0.0, foil_speed: float = 2.0) -> Dict[str, List[float]]:
    """
    Build a synthetic recording of n samples at a fixed interval.

    Samples in foil_indices are fast and below the resting altitude; all
    others sit still at rest_alt.
    """
    foil = set(foil_indices)
    return {
        'time': [i * dt for i in range(n)],
        'velocity': [foil_speed if i in foil else rest_speed for i in range(n)],
        'altitude': [foil_alt if i in foil else rest_alt for i in range(n)],
    }


def keyed_bundle(session: Dict[str, List[float]]) -> Dict[str, Any]:
    """Strava key_by_type=true shape."""
    return {
        'time': {'data': session['time']},
        'velocity_smooth': {'data': session['velocity']},
        'altitude': {'data': session['altitude']},
    }


def record_bundle(session: Dict[str, List[float]]) -> List[Dict[str, Any]]:
    """Strava array-of-records shape."""
    return [
        {'type': 'time', 'data': session['time']},
        {'type': 'velocity_smooth', 'data': session['velocity']},
        {'type': 'altitude', 'data': session['altitude']},
    ]
