"""Timer scheduler for the four session timers."""

import logging
from collections.abc import Callable
from enum import Enum, auto

from sessionkeeper.runtime.clock import TimerHandle
from sessionkeeper.session.state import SessionContext

# Receives a predicate that is True while the firing timer is still current
ExpiryCallback = Callable[[Callable[[], bool]], None]

logger = logging.getLogger(__name__)


class TimerKind(Enum):
    """The independently cancellable session timers."""

    WARNING = auto()
    EXPIRY = auto()
    TAB_HIDDEN = auto()
    PERIODIC_CHECK = auto()


class TimerScheduler:
    """Schedules warning, expiry, tab-hidden and periodic-check callbacks.

    At most one timer of each kind is live. Scheduling a kind always cancels
    the previous timer of that kind first, and every schedule is stamped with
    a per-kind generation so that a callback already handed off by the clock
    is dropped if its timer was cancelled in the meantime.
    """

    def __init__(
        self,
        ctx: SessionContext,
        on_warning: Callable[[], None],
        on_expiry: ExpiryCallback,
        on_check: Callable[[], None],
        hide_warning: Callable[[], None] | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            ctx: Shared session context.
            on_warning: Called when the warning timer fires.
            on_expiry: Called without the lock when the expiry or tab-hidden
                timer fires. It gets a predicate to re-check under the lock.
            on_check: Called on every periodic-check tick (outside the lock).
            hide_warning: Removes a shown warning prompt before a reset.
        """
        self._ctx = ctx
        self._on_warning = on_warning
        self._on_expiry = on_expiry
        self._on_check = on_check
        self._hide_warning = hide_warning
        self._handles: dict[TimerKind, TimerHandle | None] = {kind: None for kind in TimerKind}
        self._generations: dict[TimerKind, int] = {kind: 0 for kind in TimerKind}

    def is_scheduled(self, kind: TimerKind) -> bool:
        with self._ctx.lock:
            return self._handles[kind] is not None

    def start_session_timers(self) -> None:
        """(Re)start the warning and expiry timers from now."""
        config = self._ctx.config
        with self._ctx.lock:
            self.cancel(TimerKind.WARNING)
            self.cancel(TimerKind.EXPIRY)

            if config.security.show_warning:
                self._schedule(
                    TimerKind.WARNING,
                    config.session_timeout_ms - config.warning_lead_ms,
                    self._on_warning,
                )
            if config.security.force_logout_on_inactivity:
                self._schedule(TimerKind.EXPIRY, config.session_timeout_ms, self._on_expiry)

    def reset_session_timers(self) -> None:
        """Hide any shown warning, then restart the session timers."""
        with self._ctx.lock:
            if self._hide_warning is not None:
                self._hide_warning()
            self.start_session_timers()

    def start_tab_hidden_timer(self) -> None:
        """Start the grace timer for a hidden tab."""
        with self._ctx.lock:
            self._schedule(
                TimerKind.TAB_HIDDEN,
                self._ctx.config.tab_hidden_timeout_ms,
                self._on_expiry,
            )

    def cancel_tab_hidden_timer(self) -> None:
        self.cancel(TimerKind.TAB_HIDDEN)

    def start_periodic_check(self) -> None:
        """Start the repeating backend validity check."""
        with self._ctx.lock:
            self.cancel(TimerKind.PERIODIC_CHECK)
            generation = self._generations[TimerKind.PERIODIC_CHECK]
            self._handles[TimerKind.PERIODIC_CHECK] = self._ctx.clock.set_interval(
                lambda: self._tick(generation),
                self._ctx.config.check_interval_ms,
            )
            logger.debug("Periodic check every %sms", self._ctx.config.check_interval_ms)

    def cancel(self, kind: TimerKind) -> None:
        """Cancel the live timer of one kind, if any."""
        with self._ctx.lock:
            handle = self._handles[kind]
            self._generations[kind] += 1
            if handle is None:
                return
            if handle.repeating:
                self._ctx.clock.clear_interval(handle)
            else:
                self._ctx.clock.clear_timeout(handle)
            self._handles[kind] = None
            logger.debug("Cancelled %s timer", kind.name.lower())

    def cancel_all(self) -> None:
        with self._ctx.lock:
            for kind in TimerKind:
                self.cancel(kind)

    def _schedule(self, kind: TimerKind, delay_ms: float, callback: Callable[..., None]) -> None:
        self.cancel(kind)
        generation = self._generations[kind]
        self._handles[kind] = self._ctx.clock.set_timeout(
            lambda: self._fire(kind, generation, callback),
            delay_ms,
        )
        logger.debug("Scheduled %s timer in %sms", kind.name.lower(), delay_ms)

    def _fire(self, kind: TimerKind, generation: int, callback: Callable[..., None]) -> None:
        with self._ctx.lock:
            if self._generations[kind] != generation:
                return
            self._handles[kind] = None
            if kind is TimerKind.WARNING:
                callback()
                return
        # Expiry signs out over the network, so the lock is released first
        callback(lambda: self._is_current(kind, generation))

    def _is_current(self, kind: TimerKind, generation: int) -> bool:
        with self._ctx.lock:
            return self._generations[kind] == generation

    def _tick(self, generation: int) -> None:
        with self._ctx.lock:
            if self._generations[TimerKind.PERIODIC_CHECK] != generation:
                return
        # The check does backend I/O and takes the lock itself
        self._on_check()
