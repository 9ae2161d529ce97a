"""Tests for configuration loading and validation."""

import json

import pytest

from quicker_checker.config import (
    AppConfig,
    BookingConfig,
    MyTimeConfig,
    _safe_float,
    _safe_int,
    _validate_config,
    load_service_map,
)


def make_config(booking: BookingConfig = None, mytime: MyTimeConfig = None) -> AppConfig:
    config = AppConfig.__new__(AppConfig)
    object.__setattr__(config, "mytime", mytime or MyTimeConfig())
    object.__setattr__(config, "booking", booking or BookingConfig())
    object.__setattr__(config, "service_map", load_service_map())
    object.__setattr__(config, "log_level", "INFO")
    return config


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        config = AppConfig()
        _validate_config(config)  # should not raise

    def test_invalid_fallback_duration(self):
        with pytest.raises(ValueError, match="FALLBACK_DURATION_MINUTES"):
            _validate_config(make_config(booking=BookingConfig(fallback_duration_minutes=0)))

    def test_invalid_night_minutes(self):
        with pytest.raises(ValueError, match="BOARDING_NIGHT_MINUTES"):
            _validate_config(make_config(booking=BookingConfig(boarding_night_minutes=-1)))

    def test_invalid_timeout(self):
        with pytest.raises(ValueError, match="MYTIME_TIMEOUT_SECONDS"):
            _validate_config(make_config(mytime=MyTimeConfig(timeout_seconds=0)))

    def test_invalid_checkin_hour(self):
        with pytest.raises(ValueError, match="BOARDING_CHECKIN_HOUR_UTC"):
            _validate_config(make_config(booking=BookingConfig(boarding_checkin_hour_utc=24)))

    def test_unknown_timezone(self):
        with pytest.raises(ValueError, match="LOCATION_TIMEZONE"):
            _validate_config(make_config(booking=BookingConfig(location_timezone="Mars/Olympus")))

    def test_empty_location(self):
        with pytest.raises(ValueError, match="MYTIME_LOCATION_ID"):
            _validate_config(make_config(mytime=MyTimeConfig(location_id="")))


class TestSafeParsers:
    def test_safe_int_default(self, monkeypatch):
        monkeypatch.delenv("QC_TEST_INT", raising=False)
        assert _safe_int("QC_TEST_INT", "7") == 7

    def test_safe_int_bad_value(self, monkeypatch):
        monkeypatch.setenv("QC_TEST_INT", "seven")
        with pytest.raises(ValueError, match="QC_TEST_INT"):
            _safe_int("QC_TEST_INT", "7")

    def test_safe_float_bad_value(self, monkeypatch):
        monkeypatch.setenv("QC_TEST_FLOAT", "fast")
        with pytest.raises(ValueError, match="QC_TEST_FLOAT"):
            _safe_float("QC_TEST_FLOAT", "1.5")


class TestServiceMapLoading:
    def test_bundled_map(self):
        service_map = load_service_map()
        assert service_map.primary_spa_service_id == "99860007"
        assert service_map.resource_for("91404079") == "295288"
        assert service_map.display_name("91420537") == "Evaluation"

    def test_display_name_falls_back_to_id(self):
        assert load_service_map().display_name("123") == "123"

    def test_custom_path(self, tmp_path):
        path = tmp_path / "map.json"
        path.write_text(
            json.dumps(
                {
                    "version": 9,
                    "spa_resource_id": "1",
                    "boarding_resource_id": "2",
                    "primary_spa_service_id": "3",
                }
            )
        )
        service_map = load_service_map(path)
        assert service_map.version == 9
        assert service_map.daycare_services is None

    def test_env_path(self, tmp_path, monkeypatch):
        path = tmp_path / "map.json"
        path.write_text(
            json.dumps(
                {
                    "version": 4,
                    "spa_resource_id": "1",
                    "boarding_resource_id": "2",
                    "primary_spa_service_id": "3",
                }
            )
        )
        monkeypatch.setenv("SERVICE_MAP_PATH", str(path))
        assert load_service_map().version == 4

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValueError, match="Invalid service map"):
            load_service_map(tmp_path / "nope.json")

    def test_invalid_family(self, tmp_path):
        path = tmp_path / "map.json"
        path.write_text(
            json.dumps(
                {
                    "version": 1,
                    "family_by_service": {"1": "grooming"},
                    "spa_resource_id": "1",
                    "boarding_resource_id": "2",
                    "primary_spa_service_id": "3",
                }
            )
        )
        with pytest.raises(ValueError, match="Invalid service map"):
            load_service_map(path)
