"""Session configuration."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from sessionkeeper.errors import SessionConfigError

DEFAULT_ACTIVITY_EVENTS = frozenset(
    {"mousedown", "mousemove", "keypress", "scroll", "touchstart", "click"}
)

# Signals that mean the tab went away or came back
HIDDEN_EVENTS = frozenset({"blur", "pagehide"})
VISIBLE_EVENTS = frozenset({"focus", "pageshow"})
VISIBILITY_CHANGE = "visibilitychange"

DEFAULT_VISIBILITY_EVENTS = HIDDEN_EVENTS | VISIBLE_EVENTS | {VISIBILITY_CHANGE}

DEFAULT_CONFIG_PATH = Path("config/default.yaml")


@dataclass(frozen=True)
class SecurityConfig:
    """Switches for the individual logout rules."""

    force_logout_on_tab_switch: bool = True
    force_logout_on_inactivity: bool = True
    show_warning: bool = True
    allow_extension: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SecurityConfig":
        """Create from dictionary."""
        return cls(
            force_logout_on_tab_switch=bool(data.get("force_logout_on_tab_switch", True)),
            force_logout_on_inactivity=bool(data.get("force_logout_on_inactivity", True)),
            show_warning=bool(data.get("show_warning", True)),
            allow_extension=bool(data.get("allow_extension", True)),
        )


@dataclass(frozen=True)
class SessionConfig:
    """Timeouts and event names driving the session lifecycle."""

    session_timeout_ms: int = 5 * 60 * 1000  # Inactivity timeout
    warning_lead_ms: int = 60 * 1000  # Warning shown this long before expiry
    check_interval_ms: int = 30 * 1000  # Backend revalidation cadence
    tab_hidden_timeout_ms: int = 2 * 60 * 1000  # Grace window while hidden
    activity_event_names: frozenset[str] = DEFAULT_ACTIVITY_EVENTS
    visibility_event_names: frozenset[str] = DEFAULT_VISIBILITY_EVENTS
    login_route: str = "/login"
    storage_key: str = "supabase.auth.token"
    security: SecurityConfig = field(default_factory=SecurityConfig)

    def validate(self) -> None:
        """Check the configuration for consistency.

        Raises:
            SessionConfigError: If any value is out of range.
        """
        for name in (
            "session_timeout_ms",
            "warning_lead_ms",
            "check_interval_ms",
            "tab_hidden_timeout_ms",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int | float) or value <= 0:
                raise SessionConfigError(f"{name} must be a positive number, got {value!r}")

        if self.warning_lead_ms >= self.session_timeout_ms:
            raise SessionConfigError(
                f"warning_lead_ms ({self.warning_lead_ms}) must be less than "
                f"session_timeout_ms ({self.session_timeout_ms})"
            )

        if not self.activity_event_names:
            raise SessionConfigError("activity_event_names must not be empty")

        unknown = set(self.visibility_event_names) - DEFAULT_VISIBILITY_EVENTS
        if unknown:
            raise SessionConfigError(
                f"Unrecognised visibility events: {', '.join(sorted(unknown))}"
            )

    def describe(self) -> dict[str, str]:
        """Human-readable timeouts for display."""
        return {
            "session_timeout": _describe_ms(self.session_timeout_ms),
            "tab_switch_timeout": _describe_ms(self.tab_hidden_timeout_ms),
            "warning_time": _describe_ms(self.warning_lead_ms),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionConfig":
        """Create config from dictionary.

        Args:
            data: Configuration dictionary (the ``session`` section).

        Returns:
            SessionConfig instance.
        """
        activity = data.get("activity_events")
        visibility = data.get("visibility_events")
        return cls(
            session_timeout_ms=int(data.get("session_timeout_ms", 5 * 60 * 1000)),
            warning_lead_ms=int(data.get("warning_lead_ms", 60 * 1000)),
            check_interval_ms=int(data.get("check_interval_ms", 30 * 1000)),
            tab_hidden_timeout_ms=int(data.get("tab_hidden_timeout_ms", 2 * 60 * 1000)),
            activity_event_names=(
                frozenset(activity) if activity is not None else DEFAULT_ACTIVITY_EVENTS
            ),
            visibility_event_names=(
                frozenset(visibility) if visibility is not None else DEFAULT_VISIBILITY_EVENTS
            ),
            login_route=str(data.get("login_route", "/login")),
            storage_key=str(data.get("storage_key", "supabase.auth.token")),
            security=SecurityConfig.from_dict(data.get("security") or {}),
        )


def _describe_ms(ms: float) -> str:
    minutes = ms / 60000
    if minutes == int(minutes):
        minutes = int(minutes)
        return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"
    seconds = round(ms / 1000)
    return f"{seconds} second" if seconds == 1 else f"{seconds} seconds"


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load application configuration from a YAML file.

    Environment variables (including a ``.env`` file) provide the backend
    credentials under the ``supabase`` section.

    Args:
        config_path: Path to config file. Defaults to ``config/default.yaml``.

    Returns:
        Configuration dictionary.
    """
    load_dotenv()

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    loaded: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            loaded = yaml.safe_load(f) or {}

    loaded["session"] = loaded.get("session") or {}
    supabase = loaded["supabase"] = loaded.get("supabase") or {}
    if os.getenv("SUPABASE_URL"):
        supabase["url"] = os.environ["SUPABASE_URL"]
    if os.getenv("SUPABASE_KEY"):
        supabase["key"] = os.environ["SUPABASE_KEY"]

    return loaded
