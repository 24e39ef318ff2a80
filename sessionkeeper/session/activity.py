"""Activity monitor: user input resets the inactivity timers."""

import logging
from collections.abc import Callable

from sessionkeeper.runtime.events import Event, EventSource
from sessionkeeper.session.state import SessionContext

logger = logging.getLogger(__name__)


class ActivityMonitor:
    """Records user activity and requests a timer reset on every input event."""

    def __init__(
        self,
        ctx: SessionContext,
        source: EventSource,
        on_activity: Callable[[], None],
    ) -> None:
        self._ctx = ctx
        self._source = source
        self._on_activity = on_activity
        self._attached: frozenset[str] = frozenset()
        # One bound method object, reused for both on() and off()
        self._listener = self._handle_event

    @property
    def attached(self) -> bool:
        return bool(self._attached)

    def attach(self) -> None:
        """Start listening for the configured activity events."""
        if self._attached:
            return
        names = frozenset(self._ctx.config.activity_event_names)
        for name in sorted(names):
            self._source.on(name, self._listener)
        self._attached = names
        logger.debug("Listening for activity: %s", ", ".join(sorted(names)))

    def detach(self) -> None:
        """Stop listening. Safe to call when not attached."""
        for name in sorted(self._attached):
            self._source.off(name, self._listener)
        self._attached = frozenset()

    def _handle_event(self, event: Event) -> None:
        with self._ctx.lock:
            if not self._ctx.live:
                return
            self._ctx.state.last_activity_at = self._ctx.clock.now()
            self._on_activity()
