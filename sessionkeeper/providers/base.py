"""Protocol definitions for the collaborators of the session manager."""

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class AuthSession:
    """A session as reported by the auth backend."""

    expires_at_ms: float | None  # Epoch milliseconds, None if not declared
    user_id: str | None = None


class AuthProvider(Protocol):
    """Protocol for the hosted authentication backend."""

    def get_session(self) -> AuthSession | None:
        """Fetch the current session.

        Returns:
            The current session, or None if signed out.
        """
        ...

    def sign_out(self) -> None:
        """Sign the current user out. Must tolerate an already-ended session."""
        ...


class ArtifactStore(Protocol):
    """Protocol for persisted client-side session artifacts."""

    def remove(self, key: str) -> None:
        """Remove a stored item. Missing keys are ignored."""
        ...


class Navigator(Protocol):
    """Protocol for moving the user to another screen."""

    def navigate(self, route: str) -> None:
        """Navigate to route."""
        ...


@dataclass(frozen=True)
class WarningPrompt:
    """Text of the session-expiring prompt."""

    title: str
    message: str
    extend_label: str = "Stay Logged In"
    logout_label: str = "Logout Now"

    @classmethod
    def for_lead(cls, warning_lead_ms: float) -> "WarningPrompt":
        """Build the standard prompt for a given warning lead time.

        Args:
            warning_lead_ms: Time between the warning and expiry.

        Returns:
            WarningPrompt instance.
        """
        # Round up so a sub-second lead still reads as a non-zero duration
        seconds = max(1, math.ceil(warning_lead_ms / 1000))
        if seconds % 60 == 0:
            minutes = seconds // 60
            remaining = "1 minute" if minutes == 1 else f"{minutes} minutes"
        else:
            remaining = "1 second" if seconds == 1 else f"{seconds} seconds"
        return cls(
            title="Session Expiring Soon",
            message=(
                f"Your session will expire in {remaining} due to inactivity or tab "
                'switching. Click "Stay Logged In" to continue your session.'
            ),
        )


class Presenter(Protocol):
    """Protocol for showing the session-expiring prompt."""

    def show(
        self,
        prompt: WarningPrompt,
        on_extend: Callable[[], None],
        on_logout_now: Callable[[], None],
    ) -> None:
        """Present the prompt and wire its two actions."""
        ...

    def hide(self) -> None:
        """Remove the prompt. No-op when nothing is shown."""
        ...
