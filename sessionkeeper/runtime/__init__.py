"""Runtime capabilities: clocks, event sources and the desktop host."""

from sessionkeeper.runtime.clock import Clock, ManualClock, SystemClock, TimerHandle
from sessionkeeper.runtime.events import Event, EventBus, EventSource

__all__ = [
    "Clock",
    "Event",
    "EventBus",
    "EventSource",
    "ManualClock",
    "SystemClock",
    "TimerHandle",
]
