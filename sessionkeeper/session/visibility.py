"""Visibility monitor: tab hidden/visible transitions and the hidden grace window."""

import logging
from collections.abc import Callable

from sessionkeeper.config import HIDDEN_EVENTS, VISIBILITY_CHANGE, VISIBLE_EVENTS
from sessionkeeper.runtime.events import Event, EventSource
from sessionkeeper.session.state import SessionContext
from sessionkeeper.session.timers import TimerScheduler

logger = logging.getLogger(__name__)


class VisibilityMonitor:
    """Tracks whether the tab is visible and enforces the tab-hidden timeout.

    Hiding starts the tab-hidden timer. Coming back within the grace window
    cancels it and resets the session timers; coming back after it expires
    the session immediately, which covers timers that were delayed while
    the host was suspended.
    """

    def __init__(
        self,
        ctx: SessionContext,
        source: EventSource,
        scheduler: TimerScheduler,
        on_expire: Callable[[Callable[[], bool]], None],
    ) -> None:
        """Initialize the monitor.

        Args:
            ctx: Shared session context.
            source: Event source delivering visibility signals.
            scheduler: Scheduler owning the tab-hidden and session timers.
            on_expire: Called without the lock when the tab was away longer
                than allowed, with a predicate to re-check under the lock.
        """
        self._ctx = ctx
        self._source = source
        self._scheduler = scheduler
        self._on_expire = on_expire
        self._attached: frozenset[str] = frozenset()
        self._listener = self._handle_event

    @property
    def attached(self) -> bool:
        return bool(self._attached)

    def attach(self) -> None:
        """Start listening for the configured visibility events."""
        if self._attached:
            return
        names = frozenset(self._ctx.config.visibility_event_names)
        for name in sorted(names):
            self._source.on(name, self._listener)
        self._attached = names

    def detach(self) -> None:
        """Stop listening. Safe to call when not attached."""
        for name in sorted(self._attached):
            self._source.off(name, self._listener)
        self._attached = frozenset()

    def _handle_event(self, event: Event) -> None:
        if event.name == VISIBILITY_CHANGE:
            if event.hidden is None:
                return
            hidden = event.hidden
        elif event.name in HIDDEN_EVENTS:
            hidden = True
        elif event.name in VISIBLE_EVENTS:
            hidden = False
        else:
            return

        with self._ctx.lock:
            if not self._ctx.live:
                return
            if hidden:
                self._on_hidden()
                return
            if not self._on_visible():
                return
            epoch = self._ctx.epoch

        # Expiry signs out over the network, so it runs without the lock
        self._on_expire(lambda: self._ctx.epoch == epoch and not self._ctx.state.tab_visible)

    def _on_hidden(self) -> None:
        state = self._ctx.state
        if not state.tab_visible:
            # blur, visibilitychange and pagehide often arrive together
            return

        state.tab_visible = False
        state.last_tab_hidden_at = self._ctx.clock.now()
        if self._ctx.config.security.force_logout_on_tab_switch:
            self._scheduler.start_tab_hidden_timer()
        logger.debug("Tab hidden")

    def _on_visible(self) -> bool:
        """Handle a visible signal. Returns True if the session must expire."""
        state = self._ctx.state
        if not state.tab_visible and state.last_tab_hidden_at is not None:
            time_away = self._ctx.clock.now() - state.last_tab_hidden_at
            if (
                self._ctx.config.security.force_logout_on_tab_switch
                and time_away > self._ctx.config.tab_hidden_timeout_ms
            ):
                logger.info("Tab was hidden for %.0fms, ending session", time_away)
                return True
            logger.debug("Tab visible again after %.0fms", time_away)

        state.tab_visible = True
        state.last_tab_hidden_at = None
        state.last_activity_at = self._ctx.clock.now()
        self._scheduler.cancel_tab_hidden_timer()
        self._scheduler.reset_session_timers()
        return False
