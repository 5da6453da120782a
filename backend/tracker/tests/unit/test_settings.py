import pytest
from pydantic import ValidationError

from tracker.logic.settings import DEFAULT_PLAYER_COUNT, TrackerSettings


class TestTrackerSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TRACKER_PLAYER_COUNT", raising=False)
        monkeypatch.delenv("TRACKER_LOG_DIR", raising=False)
        monkeypatch.delenv("TRACKER_LOG_LEVEL", raising=False)
        monkeypatch.delenv("TRACKER_LOG_FORMAT", raising=False)
        settings = TrackerSettings()
        assert settings.player_count == DEFAULT_PLAYER_COUNT
        assert settings.log_dir is None
        assert settings.log_level == "INFO"
        assert settings.log_format == "console"

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("TRACKER_PLAYER_COUNT", "3")
        monkeypatch.setenv("TRACKER_LOG_DIR", "/tmp/tracker-logs")
        settings = TrackerSettings()
        assert settings.player_count == 3
        assert settings.log_dir == "/tmp/tracker-logs"

    def test_log_options_from_environment(self, monkeypatch):
        monkeypatch.setenv("TRACKER_LOG_LEVEL", "debug")
        monkeypatch.setenv("TRACKER_LOG_FORMAT", "JSON")
        settings = TrackerSettings()
        assert settings.log_level == "DEBUG"
        assert settings.log_format == "json"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            TrackerSettings(log_level="verbose")

    @pytest.mark.parametrize("count", [2, 5])
    def test_unsupported_player_count(self, count):
        with pytest.raises(ValidationError, match="not supported"):
            TrackerSettings(player_count=count)

    def test_unsupported_player_count_from_environment(self, monkeypatch):
        monkeypatch.setenv("TRACKER_PLAYER_COUNT", "2")
        with pytest.raises(ValidationError):
            TrackerSettings()

    def test_frozen(self):
        settings = TrackerSettings(player_count=4)
        with pytest.raises(ValidationError):
            settings.player_count = 3
