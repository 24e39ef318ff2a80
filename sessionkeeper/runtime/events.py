"""Named event sources for user activity and visibility signals."""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Event:
    """An input or visibility signal."""

    name: str
    hidden: bool | None = None  # Only meaningful for "visibilitychange"


EventHandler = Callable[[Event], None]


class EventSource(Protocol):
    """Protocol for anything that delivers named events to handlers."""

    def on(self, name: str, handler: EventHandler) -> None:
        """Register handler for events called name."""
        ...

    def off(self, name: str, handler: EventHandler) -> None:
        """Remove a handler previously passed to ``on``."""
        ...


class EventBus:
    """In-process event source.

    Handlers are matched by identity: ``off`` must receive the same object
    that was given to ``on``, and registering it twice keeps one entry.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}
        self._lock = threading.Lock()

    def on(self, name: str, handler: EventHandler) -> None:
        with self._lock:
            handlers = self._handlers.setdefault(name, [])
            if not any(h is handler for h in handlers):
                handlers.append(handler)

    def off(self, name: str, handler: EventHandler) -> None:
        with self._lock:
            handlers = self._handlers.get(name, [])
            self._handlers[name] = [h for h in handlers if h is not handler]
            if not self._handlers[name]:
                del self._handlers[name]

    def emit(self, name: str, hidden: bool | None = None) -> int:
        """Deliver an event to every handler registered for name.

        Args:
            name: Event name.
            hidden: Hidden flag for visibility changes.

        Returns:
            Number of handlers called.
        """
        with self._lock:
            handlers = list(self._handlers.get(name, []))

        event = Event(name=name, hidden=hidden)
        for handler in handlers:
            handler(event)
        return len(handlers)

    def listener_count(self, name: str | None = None) -> int:
        """Count registered handlers, for one event name or all of them."""
        with self._lock:
            if name is not None:
                return len(self._handlers.get(name, []))
            return sum(len(handlers) for handlers in self._handlers.values())
