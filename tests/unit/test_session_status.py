"""Tests for the session status read-out."""

import pytest

from sessionkeeper.session.status import SessionStatus, format_time_left


@pytest.mark.parametrize(
    "ms,expected",
    [
        (300_000, "5:00"),
        (245_000, "4:05"),
        (59_999, "0:59"),
        (0, "0:00"),
        (-1_000, "0:00"),
    ],
)
def test_format_time_left(ms, expected):
    """Test minutes and zero-padded seconds."""
    assert format_time_left(ms) == expected


class TestSessionStatus:
    """Tests for SessionStatus."""

    def test_from_running_manager(self, manager, clock):
        """Test the snapshot follows the manager's countdown."""
        manager.initialize()
        clock.advance(55_000)

        status = SessionStatus.from_manager(manager)

        assert status.visible
        assert status.label == "Session: 4:05"
        assert not status.expiring_soon

    def test_expiring_soon(self, manager, clock):
        """Test the snapshot flags the last minute."""
        manager.initialize()
        clock.advance(250_000)

        assert SessionStatus.from_manager(manager).expiring_soon

    def test_hidden_without_session(self, manager):
        """Test nothing is displayed when no session is running."""
        status = SessionStatus.from_manager(manager)

        assert not status.visible
