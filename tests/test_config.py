"""Tests for Settings and logging configuration."""

import json
import logging

import pytest

from probe_monitor.config import Settings, get_env_int
from probe_monitor.errors import ConfigurationError
from probe_monitor.logging_config import JSONFormatter


class TestSettingsFromEnv:
    """Tests for Settings.from_env()."""

    def test_defaults(self):
        """Test that only the channel is required in monitor mode."""
        settings = Settings.from_env({"PROBE_CHANNEL_URL": "memory://"})

        assert settings.mode == "monitor"
        assert settings.latency_threshold_seconds == 10
        assert settings.publish_interval_seconds == 30
        assert settings.expiry_timeout_seconds == 20
        assert settings.sweep_interval_seconds == 5
        assert settings.health_poll_interval_seconds == 10
        assert settings.health_wait_seconds == 300
        assert settings.loopback

    def test_overrides(self):
        """Test that environment values override defaults."""
        settings = Settings.from_env(
            {
                "PROBE_CHANNEL_URL": "https://channel.test/publish",
                "LATENCY_THRESHOLD_SECONDS": "3",
                "HEALTHCHECK_TIMEOUT": "45",
                "WAIT_MINUTES": "2",
                "ADDR": "http://target.test/",
                "API_PORT": "9000",
            }
        )

        assert settings.latency_threshold_seconds == 3
        assert settings.expiry_timeout_seconds == 45
        assert settings.health_wait_seconds == 120
        assert settings.health_target_url == "http://target.test/"
        assert settings.api_port == 9000
        assert not settings.loopback

    def test_missing_channel_is_fatal(self):
        """Test that monitor mode requires PROBE_CHANNEL_URL."""
        with pytest.raises(ConfigurationError, match="PROBE_CHANNEL_URL"):
            Settings.from_env({})

    def test_responder_needs_no_channel(self):
        """Test that the responder role starts without a channel URL."""
        settings = Settings.from_env({"MODE": "responder"})

        assert settings.mode == "responder"

    def test_unknown_mode_is_fatal(self):
        """Test that an unknown MODE is rejected."""
        with pytest.raises(ConfigurationError, match="Unknown MODE"):
            Settings.from_env({"MODE": "lambda", "PROBE_CHANNEL_URL": "memory://"})

    def test_non_positive_values_are_fatal(self):
        """Test that a zero interval is rejected."""
        with pytest.raises(ConfigurationError, match="PUBLISH_INTERVAL_SECONDS"):
            Settings.from_env(
                {"PROBE_CHANNEL_URL": "memory://", "PUBLISH_INTERVAL_SECONDS": "0"}
            )


class TestGetEnvInt:
    """Tests for get_env_int()."""

    def test_malformed_value_falls_back(self):
        """Test that garbage falls back to the default."""
        assert get_env_int({"X": "ten"}, "X", 10) == 10

    def test_unset_value_falls_back(self):
        assert get_env_int({}, "X", 7) == 7

    def test_whitespace_is_trimmed(self):
        assert get_env_int({"X": " 42 "}, "X", 7) == 42


class TestJSONFormatter:
    """Tests for the structured log formatter."""

    def test_format_includes_context(self):
        """Test that extra context ends up in the JSON document."""
        record = logging.LogRecord(
            name="probe_monitor.engine",
            level=logging.WARNING,
            pathname=__file__,
            lineno=1,
            msg="Latency %.2fs exceeds threshold",
            args=(12.0,),
            exc_info=None,
        )
        record.context = {"probe_id": "1000-1"}

        data = json.loads(JSONFormatter().format(record))

        assert data["level"] == "WARNING"
        assert data["message"] == "Latency 12.00s exceeds threshold"
        assert data["context"] == {"probe_id": "1000-1"}
        assert data["probe_id"] == "1000-1"

    def test_format_without_probe(self):
        """Test that records without probe context carry no probe_id key."""
        record = logging.LogRecord(
            name="probe_monitor.app",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="Monitor stopped",
            args=(),
            exc_info=None,
        )

        data = json.loads(JSONFormatter().format(record))

        assert "probe_id" not in data
        assert "context" not in data
