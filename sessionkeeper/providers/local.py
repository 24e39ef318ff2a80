"""In-process auth backend for offline use and the demo host."""

import threading
import uuid

from sessionkeeper.providers.base import AuthSession
from sessionkeeper.runtime.clock import Clock, SystemClock


class LocalAuthProvider:
    """Issues sessions with a fixed lifetime without any network calls."""

    def __init__(
        self,
        session_lifetime_ms: float = 60 * 60 * 1000,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            session_lifetime_ms: How long an issued session stays valid.
            clock: Time source for expiry timestamps.
        """
        self._lifetime = session_lifetime_ms
        self._clock = clock or SystemClock()
        self._session: AuthSession | None = None
        self._lock = threading.Lock()
        self.sign_out_count = 0

    def sign_in(self, user_id: str | None = None) -> AuthSession:
        """Start a new session.

        Args:
            user_id: Identifier of the user. Generated if omitted.

        Returns:
            The issued session.
        """
        with self._lock:
            self._session = AuthSession(
                expires_at_ms=self._clock.now() + self._lifetime,
                user_id=user_id or uuid.uuid4().hex,
            )
            return self._session

    def get_session(self) -> AuthSession | None:
        with self._lock:
            return self._session

    def sign_out(self) -> None:
        with self._lock:
            self._session = None
            self.sign_out_count += 1
