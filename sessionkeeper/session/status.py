"""Session status read-out for display next to the page header."""

from dataclasses import dataclass

from sessionkeeper.session.manager import SessionManager


def format_time_left(milliseconds: float) -> str:
    """Format a duration as minutes and zero-padded seconds, e.g. "4:05"."""
    milliseconds = max(0, int(milliseconds))
    minutes = milliseconds // 60000
    seconds = (milliseconds % 60000) // 1000
    return f"{minutes}:{seconds:02d}"


@dataclass(frozen=True)
class SessionStatus:
    """Snapshot of the time left in the current session."""

    time_left_ms: float
    expiring_soon: bool

    @property
    def visible(self) -> bool:
        """Whether the status should be displayed at all."""
        return self.time_left_ms > 0

    @property
    def label(self) -> str:
        return f"Session: {format_time_left(self.time_left_ms)}"

    @classmethod
    def from_manager(cls, manager: SessionManager) -> "SessionStatus":
        """Take a snapshot of a session manager.

        Args:
            manager: Manager to read.

        Returns:
            SessionStatus instance.
        """
        return cls(
            time_left_ms=manager.get_time_until_expiry(),
            expiring_soon=manager.is_session_expiring_soon(),
        )
