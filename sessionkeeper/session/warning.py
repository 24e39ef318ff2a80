"""Session-expiring warning prompt."""

import logging
from collections.abc import Callable

from sessionkeeper.providers.base import Presenter, WarningPrompt
from sessionkeeper.session.state import SessionContext, SessionPhase

logger = logging.getLogger(__name__)


class WarningPresenter:
    """Shows at most one "session expiring" prompt with Extend and Logout actions."""

    def __init__(
        self,
        ctx: SessionContext,
        presenter: Presenter,
        on_extend: Callable[[], None],
        on_logout_now: Callable[[], None],
    ) -> None:
        """Initialize the warning presenter.

        Args:
            ctx: Shared session context.
            presenter: UI capability that renders the prompt.
            on_extend: Called after the prompt closes via "Stay Logged In".
            on_logout_now: Called after the prompt closes via "Logout Now".
        """
        self._ctx = ctx
        self._presenter = presenter
        self._on_extend = on_extend
        self._on_logout_now = on_logout_now
        self._shown = False
        self._prompt = WarningPrompt.for_lead(ctx.config.warning_lead_ms)

    @property
    def is_shown(self) -> bool:
        return self._shown

    def show(self) -> None:
        """Present the prompt and notify the caller's warning callback."""
        with self._ctx.lock:
            if self._shown or not self._ctx.live:
                return

            self._shown = True
            self._ctx.phase = SessionPhase.WARNING_SHOWN
            logger.info("Session expiring soon, showing warning")
            self._presenter.show(self._prompt, self._extend_clicked, self._logout_clicked)

            callback = self._ctx.on_warning
            if callback is not None:
                try:
                    callback()
                except Exception:
                    logger.exception("Session warning callback failed")

    def hide(self) -> None:
        """Remove the prompt. No-op when it is not shown."""
        with self._ctx.lock:
            if not self._shown:
                return
            self._shown = False
            self._presenter.hide()
            if self._ctx.phase is SessionPhase.WARNING_SHOWN:
                self._ctx.phase = SessionPhase.ACTIVE

    def _extend_clicked(self) -> None:
        with self._ctx.lock:
            if not self._shown:
                return
            if not self._ctx.config.security.allow_extension:
                logger.info("Session extension is disabled, keeping the warning")
                return
            self.hide()
        self._on_extend()

    def _logout_clicked(self) -> None:
        with self._ctx.lock:
            if not self._shown:
                return
            self.hide()
        self._on_logout_now()
