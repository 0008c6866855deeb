"""
Tests for application settings.
"""

import pytest

from config.settings import FoilConfig, StravaConfig, lift_polarity_from_env


class TestLiftPolarityFromEnv:
    """Tests for reading FOIL_LIFT_POLARITY."""

    def test_default_is_descending(self, monkeypatch):
        monkeypatch.delenv("FOIL_LIFT_POLARITY", raising=False)
        assert lift_polarity_from_env() == "descending"

    def test_value_is_normalized(self, monkeypatch):
        monkeypatch.setenv("FOIL_LIFT_POLARITY", " Ascending ")
        assert lift_polarity_from_env() == "ascending"

    def test_unknown_value_fails_clearly(self, monkeypatch):
        monkeypatch.setenv("FOIL_LIFT_POLARITY", "sideways")
        with pytest.raises(ValueError, match="FOIL_LIFT_POLARITY must be one of"):
            lift_polarity_from_env()


class TestConfigClasses:
    """Tests for the typed configuration sections."""

    def test_foil_config_defaults(self):
        config = FoilConfig.as_dict()
        assert config["planing_speed"] == 0.8
        assert config["moving_speed_threshold"] <= config["planing_speed"]

    def test_strava_config_omits_secret(self):
        config = StravaConfig.as_dict()
        assert config["oauth_url"] == "https://www.strava.com/oauth"
        assert "client_secret" not in config
