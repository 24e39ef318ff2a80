"""Idempotent session termination."""

import logging
from collections.abc import Callable

from sessionkeeper.providers.base import ArtifactStore, AuthProvider, Navigator
from sessionkeeper.session.state import SessionContext, SessionPhase
from sessionkeeper.session.timers import TimerScheduler
from sessionkeeper.session.warning import WarningPresenter

logger = logging.getLogger(__name__)


class ExpiryHandler:
    """Ends the session exactly once per epoch.

    The synchronous part (cancel timers, hide the warning, mark the phase
    EXPIRED, drop listeners) runs under the session lock before any backend
    call, so every later or concurrent invocation sees EXPIRED and returns.
    """

    def __init__(
        self,
        ctx: SessionContext,
        scheduler: TimerScheduler,
        warning: WarningPresenter,
        auth: AuthProvider,
        storage: ArtifactStore,
        navigator: Navigator,
        detach_listeners: Callable[[], None],
    ) -> None:
        self._ctx = ctx
        self._scheduler = scheduler
        self._warning = warning
        self._auth = auth
        self._storage = storage
        self._navigator = navigator
        self._detach_listeners = detach_listeners

    def handle_expiry(self, still_due: Callable[[], bool] | None = None) -> bool:
        """Terminate the session.

        Args:
            still_due: Checked under the lock before anything is torn down.
                When it returns False the trigger went stale (the timer was
                reset, or activity made the session valid again) and nothing
                happens.

        Returns:
            True if this call ended the session, False if it had already ended.
        """
        with self._ctx.lock:
            if not self._ctx.live:
                return False
            if still_due is not None and not still_due():
                logger.debug("Expiry trigger went stale, ignoring")
                return False

            self._scheduler.cancel_all()
            self._warning.hide()
            self._ctx.phase = SessionPhase.EXPIRED
            self._detach_listeners()
            self._ctx.end_epoch()
            on_expired = self._ctx.on_expired

        logger.info("Session expired, signing out")
        self._finish(on_expired)
        return True

    def _finish(self, on_expired: Callable[[], None] | None) -> None:
        try:
            self._auth.sign_out()
        except Exception as e:
            logger.warning("Sign-out failed, continuing with local cleanup: %s", e)

        try:
            self._storage.remove(self._ctx.config.storage_key)
        except Exception as e:
            logger.warning("Could not clear stored session data: %s", e)

        if on_expired is not None:
            try:
                on_expired()
                return
            except Exception:
                logger.exception("Session expiry callback failed, redirecting to login")

        self._navigator.navigate(self._ctx.config.login_route)
