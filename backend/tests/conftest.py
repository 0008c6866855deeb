"""
Shared fixtures for foil analysis tests.
"""

import pytest
from typing import Dict, List

from tests.helpers import build_session


@pytest.fixture
def three_flight_session() -> Dict[str, List[float]]:
    """
    29 samples at 1 Hz: rest for 10s, then flights of 2s, 4s and 6s
    separated by single resting samples.
    """
    foil = list(range(11, 14)) + list(range(15, 20)) + list(range(21, 28))
    return build_session(29, foil)


@pytest.fixture
def resting_session() -> Dict[str, List[float]]:
    """A recording where the rider never moves."""
    return build_session(30, [])
