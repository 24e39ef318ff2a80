"""Tests for session configuration."""

from dataclasses import replace
from pathlib import Path

import pytest

from sessionkeeper.config import (
    DEFAULT_ACTIVITY_EVENTS,
    DEFAULT_VISIBILITY_EVENTS,
    SecurityConfig,
    SessionConfig,
    load_config,
)
from sessionkeeper.errors import SessionConfigError


class TestSessionConfig:
    """Tests for SessionConfig."""

    def test_default_values(self):
        """Test default configuration values."""
        config = SessionConfig()
        assert config.session_timeout_ms == 300_000
        assert config.warning_lead_ms == 60_000
        assert config.check_interval_ms == 30_000
        assert config.tab_hidden_timeout_ms == 120_000
        assert config.activity_event_names == DEFAULT_ACTIVITY_EVENTS
        assert config.visibility_event_names == DEFAULT_VISIBILITY_EVENTS
        assert config.login_route == "/login"
        assert config.storage_key == "supabase.auth.token"

    def test_from_dict(self):
        """Test creating config from dictionary."""
        data = {
            "session_timeout_ms": 600_000,
            "warning_lead_ms": 30_000,
            "check_interval_ms": 10_000,
            "tab_hidden_timeout_ms": 60_000,
            "activity_events": ["keypress"],
            "visibility_events": ["blur", "focus"],
            "login_route": "/signin",
            "security": {"allow_extension": False},
        }
        config = SessionConfig.from_dict(data)
        assert config.session_timeout_ms == 600_000
        assert config.warning_lead_ms == 30_000
        assert config.check_interval_ms == 10_000
        assert config.tab_hidden_timeout_ms == 60_000
        assert config.activity_event_names == frozenset({"keypress"})
        assert config.visibility_event_names == frozenset({"blur", "focus"})
        assert config.login_route == "/signin"
        assert config.security.allow_extension is False
        assert config.security.show_warning is True

    def test_from_dict_defaults(self):
        """Test from_dict uses defaults for missing keys."""
        config = SessionConfig.from_dict({})
        assert config == SessionConfig()

    def test_default_config_is_valid(self):
        """Test the defaults pass validation."""
        SessionConfig().validate()

    def test_warning_lead_must_be_shorter_than_timeout(self):
        """Test validation rejects a warning lead >= timeout."""
        config = SessionConfig(session_timeout_ms=60_000, warning_lead_ms=60_000)
        with pytest.raises(SessionConfigError, match="warning_lead_ms"):
            config.validate()

    @pytest.mark.parametrize(
        "field",
        ["session_timeout_ms", "warning_lead_ms", "check_interval_ms", "tab_hidden_timeout_ms"],
    )
    def test_durations_must_be_positive(self, field):
        """Test validation rejects zero durations."""
        config = replace(SessionConfig(), **{field: 0})
        with pytest.raises(SessionConfigError, match=field):
            config.validate()

    def test_empty_activity_events_rejected(self):
        """Test validation rejects an empty activity event set."""
        config = SessionConfig(activity_event_names=frozenset())
        with pytest.raises(SessionConfigError):
            config.validate()

    def test_unknown_visibility_event_rejected(self):
        """Test validation rejects unrecognised visibility signals."""
        config = SessionConfig(visibility_event_names=frozenset({"blur", "resize"}))
        with pytest.raises(SessionConfigError, match="resize"):
            config.validate()

    def test_config_error_is_value_error(self):
        """Test SessionConfigError can be caught as ValueError."""
        with pytest.raises(ValueError):
            SessionConfig(warning_lead_ms=400_000).validate()

    def test_describe(self):
        """Test human-readable timeout descriptions."""
        assert SessionConfig().describe() == {
            "session_timeout": "5 minutes",
            "tab_switch_timeout": "2 minutes",
            "warning_time": "1 minute",
        }

    def test_describe_seconds(self):
        """Test sub-minute durations are described in seconds."""
        config = SessionConfig(warning_lead_ms=45_000)
        assert config.describe()["warning_time"] == "45 seconds"


class TestSecurityConfig:
    """Tests for SecurityConfig."""

    def test_defaults_enable_everything(self):
        """Test every rule is enabled by default."""
        security = SecurityConfig()
        assert security.force_logout_on_tab_switch
        assert security.force_logout_on_inactivity
        assert security.show_warning
        assert security.allow_extension

    def test_from_dict(self):
        """Test creating from dictionary."""
        security = SecurityConfig.from_dict({"force_logout_on_tab_switch": False})
        assert security.force_logout_on_tab_switch is False
        assert security.force_logout_on_inactivity is True


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file_gives_defaults(self, tmp_path: Path, monkeypatch):
        """Test a missing file yields empty sections."""
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.delenv("SUPABASE_KEY", raising=False)
        config = load_config(tmp_path / "missing.yaml")
        assert config["session"] == {}
        assert config["supabase"] == {}

    def test_loads_yaml(self, tmp_path: Path):
        """Test loading a YAML file."""
        path = tmp_path / "config.yaml"
        path.write_text(
            """
session:
  session_timeout_ms: 120000
  warning_lead_ms: 20000
window:
  fps: 60
"""
        )
        config = load_config(path)
        session = SessionConfig.from_dict(config["session"])
        assert session.session_timeout_ms == 120_000
        assert session.warning_lead_ms == 20_000
        assert config["window"]["fps"] == 60

    def test_environment_supplies_supabase_credentials(self, tmp_path: Path, monkeypatch):
        """Test SUPABASE_URL and SUPABASE_KEY override the file."""
        monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
        monkeypatch.setenv("SUPABASE_KEY", "anon-key")
        config = load_config(tmp_path / "missing.yaml")
        assert config["supabase"] == {"url": "https://example.supabase.co", "key": "anon-key"}
