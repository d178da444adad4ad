"""Tests for the service entry point."""

from unittest.mock import patch

import pytest

import main


@pytest.fixture
def entry_point():
    """main() with .env loading, logging setup and uvicorn patched out."""
    with patch.object(main, "load_dotenv"), patch.object(
        main, "setup_logging"
    ), patch.object(main.uvicorn, "run") as run:
        yield run


class TestMain:
    """Tests for main() exit codes."""

    def test_missing_channel_exits_non_zero(self, entry_point, monkeypatch):
        """Test that monitor mode without PROBE_CHANNEL_URL fails to start."""
        monkeypatch.setenv("MODE", "monitor")
        monkeypatch.delenv("PROBE_CHANNEL_URL", raising=False)

        assert main.main() == 1
        entry_point.assert_not_called()

    def test_unknown_mode_exits_non_zero(self, entry_point, monkeypatch):
        """Test that an unknown MODE fails to start."""
        monkeypatch.setenv("MODE", "lambda")
        monkeypatch.setenv("PROBE_CHANNEL_URL", "memory://")

        assert main.main() == 1
        entry_point.assert_not_called()

    def test_valid_settings_start_server(self, entry_point, monkeypatch):
        """Test that a valid configuration hands the app to uvicorn."""
        monkeypatch.setenv("MODE", "monitor")
        monkeypatch.setenv("PROBE_CHANNEL_URL", "memory://")
        monkeypatch.setenv("API_PORT", "9100")

        assert main.main() == 0
        entry_point.assert_called_once()
        assert entry_point.call_args.kwargs["port"] == 9100
