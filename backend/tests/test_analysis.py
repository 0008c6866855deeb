"""
Tests for stream normalization and the full foil analysis.
"""

import pytest
import numpy as np

from core.analysis import analyze, calculate_stats
from core.models.segment import FoilSegment, FoilStats
from core.segments.detector import FoilDetectionParams
from core.streams import TelemetryStreams, normalize_streams
from core.validation import InvalidInputError, ValidationError
from tests.helpers import build_session, keyed_bundle, record_bundle


class TestNormalizeStreams:
    """Tests for normalize_streams function."""

    def test_keyed_shape(self, three_flight_session):
        streams = normalize_streams(keyed_bundle(three_flight_session))
        assert isinstance(streams, TelemetryStreams)
        assert len(streams) == 29
        assert streams.velocity.dtype == float

    def test_record_shape_matches_keyed(self, three_flight_session):
        keyed = normalize_streams(keyed_bundle(three_flight_session))
        records = normalize_streams(record_bundle(three_flight_session))
        np.testing.assert_array_equal(keyed.time, records.time)
        np.testing.assert_array_equal(keyed.velocity, records.velocity)
        np.testing.assert_array_equal(keyed.altitude, records.altitude)

    def test_extra_streams_ignored(self, three_flight_session):
        bundle = keyed_bundle(three_flight_session)
        bundle['grade_smooth'] = {'data': [0.0] * 29}
        records = record_bundle(three_flight_session) + [{'type': 'latlng', 'data': [[0, 0]] * 29}]
        assert normalize_streams(bundle) is not None
        assert normalize_streams(records) is not None

    def test_passthrough(self, three_flight_session):
        streams = normalize_streams(keyed_bundle(three_flight_session))
        again = normalize_streams(streams)
        np.testing.assert_array_equal(again.time, streams.time)
        np.testing.assert_array_equal(again.altitude, streams.altitude)

    @pytest.mark.parametrize("missing", ['time', 'velocity_smooth', 'altitude'])
    def test_missing_keyed_stream(self, three_flight_session, missing):
        bundle = keyed_bundle(three_flight_session)
        del bundle[missing]
        assert normalize_streams(bundle) is None

    @pytest.mark.parametrize("missing", ['time', 'velocity_smooth', 'altitude'])
    def test_missing_record_stream(self, three_flight_session, missing):
        records = [r for r in record_bundle(three_flight_session) if r['type'] != missing]
        assert normalize_streams(records) is None

    @pytest.mark.parametrize("empty", ['time', 'velocity_smooth', 'altitude'])
    def test_empty_stream_treated_as_missing(self, three_flight_session, empty):
        bundle = keyed_bundle(three_flight_session)
        bundle[empty] = {'data': []}
        assert normalize_streams(bundle) is None

    def test_unsupported_bundle(self):
        assert normalize_streams(None) is None
        assert normalize_streams(42) is None
        assert normalize_streams("time") is None

    def test_length_mismatch_fails_fast(self, three_flight_session):
        bundle = keyed_bundle(three_flight_session)
        bundle['altitude'] = {'data': three_flight_session['altitude'][:-1]}
        with pytest.raises(InvalidInputError, match="length mismatch"):
            normalize_streams(bundle)

    def test_non_numeric_data_rejected(self, three_flight_session):
        bundle = keyed_bundle(three_flight_session)
        bundle['velocity_smooth'] = {'data': ['fast'] * 29}
        with pytest.raises(InvalidInputError):
            normalize_streams(bundle)

    def test_invalid_input_is_validation_error(self):
        assert issubclass(InvalidInputError, ValidationError)


class TestAnalyze:
    """Tests for the analyze entry point."""

    def test_missing_stream_returns_none(self, three_flight_session):
        bundle = keyed_bundle(three_flight_session)
        del bundle['altitude']
        assert analyze(bundle) is None

    def test_three_flights(self, three_flight_session):
        result = analyze(keyed_bundle(three_flight_session))
        assert result.baseline_altitude == pytest.approx(5.0)
        assert result.foil_segments == (
            FoilSegment(11, 13), FoilSegment(15, 19), FoilSegment(21, 27)
        )
        # 12s on foil out of 18s moving (pairs touching a flight sample)
        assert result.stats.total_foil_seconds == pytest.approx(12.0)
        assert result.stats.moving_seconds == pytest.approx(18.0)
        assert result.stats.total_foil_time == "0.2"
        assert result.stats.number_of_flights == 3
        assert result.stats.percent_foil == "66.7"
        assert result.stats.total_runs == 1

    def test_both_shapes_agree(self, three_flight_session):
        keyed = analyze(keyed_bundle(three_flight_session))
        records = analyze(record_bundle(three_flight_session))
        assert keyed.to_dict() == records.to_dict()

    def test_empty_result_stats(self, resting_session):
        """A session without flights yields zero-valued stats."""
        result = analyze(keyed_bundle(resting_session))
        assert result is not None
        assert result.foil_segments == ()
        assert result.stats.to_dict() == {
            'totalFoilTime': "0.0",
            'numberOfFlights': 0,
            'percentFoil': "0",
            'totalRuns': 0,
        }

    def test_single_sample(self):
        result = analyze(keyed_bundle({'time': [0], 'velocity': [3.0], 'altitude': [2.0]}))
        assert result.baseline_altitude == pytest.approx(2.0)
        assert result.foil_segments == ()

    def test_trailing_flight_counted(self):
        session = build_session(16, range(11, 16))
        result = analyze(keyed_bundle(session))
        assert result.foil_segments == (FoilSegment(11, 15),)
        assert result.stats.total_foil_seconds == pytest.approx(4.0)

    def test_separate_runs(self):
        """Flights more than 30s apart are separate runs."""
        session = build_session(80, list(range(11, 16)) + list(range(20, 25)) + list(range(60, 70)))
        result = analyze(keyed_bundle(session))
        assert result.stats.number_of_flights == 3
        assert result.stats.total_runs == 2

    @pytest.mark.parametrize("seed", range(5))
    def test_percent_foil_bounded(self, seed):
        """percentFoil stays within 0-100 on noisy recordings."""
        rng = np.random.RandomState(seed)
        n = 600
        time = np.cumsum(rng.uniform(0.5, 1.5, n))
        velocity = np.abs(rng.normal(1.5, 1.0, n))
        altitude = 5.0 - np.abs(rng.normal(0.0, 0.4, n))
        bundle = {
            'time': {'data': time.tolist()},
            'velocity_smooth': {'data': velocity.tolist()},
            'altitude': {'data': altitude.tolist()},
        }
        result = analyze(bundle, FoilDetectionParams(persistence_seconds=1))
        assert 0 <= float(result.stats.percent_foil) <= 100

    def test_slow_flight_with_high_moving_threshold(self):
        """Flights near planing speed cannot be tuned out of the moving time."""
        session = build_session(30, range(11, 25))
        session['velocity'] = [
            (1.0, 1.0, 2.0, 2.0)[i % 4] if 11 <= i <= 24 else 0.0 for i in range(30)
        ]
        with pytest.raises(ValidationError):
            analyze(keyed_bundle(session), FoilDetectionParams(moving_speed_threshold=1.2))

        result = analyze(keyed_bundle(session), FoilDetectionParams(moving_speed_threshold=0.8))
        assert result.stats.total_foil_seconds == pytest.approx(13.0)
        assert 0 <= float(result.stats.percent_foil) <= 100

    def test_invalid_params(self, three_flight_session):
        with pytest.raises(ValidationError):
            analyze(keyed_bundle(three_flight_session), FoilDetectionParams(run_gap_seconds=-5))

    def test_to_dict_shape(self, three_flight_session):
        data = analyze(record_bundle(three_flight_session)).to_dict()
        assert set(data) == {'baselineAltitude', 'foilSegments', 'stats', 'data'}
        assert data['foilSegments'][0] == {'start': 11, 'end': 13}
        assert data['data']['time'] == three_flight_session['time']
        assert data['data']['velocity'] == three_flight_session['velocity']
        assert data['data']['altitude'] == three_flight_session['altitude']

    def test_calls_are_independent(self, three_flight_session, resting_session):
        first = analyze(keyed_bundle(three_flight_session))
        analyze(keyed_bundle(resting_session))
        again = analyze(keyed_bundle(three_flight_session))
        assert first.to_dict() == again.to_dict()


class TestCalculateStats:
    """Tests for calculate_stats function."""

    def test_no_segments(self, resting_session):
        streams = normalize_streams(keyed_bundle(resting_session))
        stats = calculate_stats([], streams)
        assert stats == FoilStats("0.0", 0, "0", 0, 0.0, 0.0)
