"""Session lifecycle: inactivity, tab-hidden and backend expiry."""

from sessionkeeper.session.manager import (
    SessionManager,
    create_session_manager,
    extend_session,
    get_session_manager,
    get_time_until_expiry,
    initialize_session_manager,
    is_session_expiring_soon,
    logout,
    reset_session_manager,
    set_session_manager,
)
from sessionkeeper.session.state import SessionPhase
from sessionkeeper.session.status import SessionStatus, format_time_left
from sessionkeeper.session.timers import TimerKind

__all__ = [
    "SessionManager",
    "SessionPhase",
    "SessionStatus",
    "TimerKind",
    "create_session_manager",
    "extend_session",
    "format_time_left",
    "get_session_manager",
    "get_time_until_expiry",
    "initialize_session_manager",
    "is_session_expiring_soon",
    "logout",
    "reset_session_manager",
    "set_session_manager",
]
