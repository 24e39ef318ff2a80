"""Periodic revalidation of the session against the auth backend."""

import logging
from collections.abc import Callable

from sessionkeeper.providers.base import AuthProvider, AuthSession
from sessionkeeper.session.state import SessionContext

logger = logging.getLogger(__name__)


class SessionValidator:
    """Fail-closed validity check run on every periodic tick."""

    def __init__(
        self,
        ctx: SessionContext,
        auth: AuthProvider,
        on_invalid: Callable[[Callable[[], bool]], None],
    ) -> None:
        self._ctx = ctx
        self._auth = auth
        self._on_invalid = on_invalid

    def check(self) -> bool:
        """Ask the backend whether the session is still valid.

        Neither the backend call nor the resulting expiry holds the session
        lock. If the epoch changed or the session expired while the call was
        in flight, the result is discarded.

        Returns:
            True if the session is still valid, False otherwise.
        """
        with self._ctx.lock:
            if not self._ctx.live:
                return False
            epoch = self._ctx.epoch

        session: AuthSession | None = None
        fetch_failed = False
        try:
            session = self._auth.get_session()
        except Exception:
            logger.exception("Error checking session validity")
            fetch_failed = True

        with self._ctx.lock:
            if self._ctx.epoch != epoch or not self._ctx.live:
                return False

            reason = "backend unreachable" if fetch_failed else self.invalid_reason(session)
            if reason is None:
                return True

        logger.info("Session invalid: %s", reason)

        def still_invalid() -> bool:
            if self._ctx.epoch != epoch:
                return False
            return fetch_failed or self.invalid_reason(session) is not None

        # Expiry signs out over the network, so it runs without the lock
        self._on_invalid(still_invalid)
        return False

    def invalid_reason(self, session: AuthSession | None) -> str | None:
        """Explain why a session is invalid right now, or None if it is valid.

        Args:
            session: Session reported by the backend.

        Returns:
            Short reason string, or None.
        """
        config = self._ctx.config
        state = self._ctx.state
        now = self._ctx.clock.now()

        if session is None:
            return "no session"

        if session.expires_at_ms is None:
            return "session has no declared expiry"

        if now >= session.expires_at_ms:
            return "session expired on the backend"

        if (
            config.security.force_logout_on_inactivity
            and now - state.last_activity_at >= config.session_timeout_ms
        ):
            return "inactive too long"

        if (
            config.security.force_logout_on_tab_switch
            and not state.tab_visible
            and state.last_tab_hidden_at is not None
            and now - state.last_tab_hidden_at >= config.tab_hidden_timeout_ms
        ):
            return "tab hidden too long"

        return None
