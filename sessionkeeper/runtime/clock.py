"""Clock abstraction: current time plus cancellable one-shot and repeating timers."""

import heapq
import itertools
import threading
import time
from collections.abc import Callable
from typing import Protocol

TimerCallback = Callable[[], None]


class TimerHandle:
    """Opaque handle for a scheduled timer."""

    _ids = itertools.count(1)

    def __init__(self, interval_ms: float | None = None) -> None:
        self.id = next(self._ids)
        self.interval_ms = interval_ms
        self._cancelled = False
        self._on_cancel: Callable[[], None] | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def repeating(self) -> bool:
        return self.interval_ms is not None

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()

    def __repr__(self) -> str:
        kind = "interval" if self.repeating else "timeout"
        state = "cancelled" if self._cancelled else "live"
        return f"<TimerHandle {self.id} {kind} {state}>"


class Clock(Protocol):
    """Protocol for time sources that can schedule callbacks."""

    def now(self) -> float:
        """Current time in epoch milliseconds."""
        ...

    def set_timeout(self, callback: TimerCallback, delay_ms: float) -> TimerHandle:
        """Run callback once after delay_ms."""
        ...

    def clear_timeout(self, handle: TimerHandle) -> None:
        """Cancel a one-shot timer. Unknown or fired handles are ignored."""
        ...

    def set_interval(self, callback: TimerCallback, interval_ms: float) -> TimerHandle:
        """Run callback every interval_ms until cleared."""
        ...

    def clear_interval(self, handle: TimerHandle) -> None:
        """Cancel a repeating timer."""
        ...


class SystemClock:
    """Wall-clock time with thread-backed timers."""

    def now(self) -> float:
        return time.time() * 1000

    def set_timeout(self, callback: TimerCallback, delay_ms: float) -> TimerHandle:
        handle = TimerHandle()

        def fire() -> None:
            if not handle.cancelled:
                callback()

        timer = threading.Timer(max(delay_ms, 0) / 1000, fire)
        timer.daemon = True
        handle._on_cancel = timer.cancel
        timer.start()
        return handle

    def clear_timeout(self, handle: TimerHandle) -> None:
        handle.cancel()

    def set_interval(self, callback: TimerCallback, interval_ms: float) -> TimerHandle:
        handle = TimerHandle(interval_ms)
        stop = threading.Event()
        handle._on_cancel = stop.set

        def loop() -> None:
            while not stop.wait(interval_ms / 1000):
                callback()

        thread = threading.Thread(target=loop, daemon=True)
        thread.start()
        return handle

    def clear_interval(self, handle: TimerHandle) -> None:
        handle.cancel()


class ManualClock:
    """Simulated clock for deterministic tests.

    Time only moves when ``advance`` is called. Due callbacks run in
    deadline order, ties in the order they were scheduled, and each one
    sees ``now()`` equal to its own deadline.
    """

    # Cancelled entries are dropped once they outnumber the live ones
    _COMPACT_MIN = 64

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now = start_ms
        self._queue: list[tuple[float, int, TimerHandle, TimerCallback]] = []
        self._seq = itertools.count()
        self.scheduled_count = 0

    def now(self) -> float:
        return self._now

    def set_timeout(self, callback: TimerCallback, delay_ms: float) -> TimerHandle:
        handle = TimerHandle()
        self._push(self._now + max(delay_ms, 0), handle, callback)
        return handle

    def clear_timeout(self, handle: TimerHandle) -> None:
        handle.cancel()

    def set_interval(self, callback: TimerCallback, interval_ms: float) -> TimerHandle:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        handle = TimerHandle(interval_ms)
        self._push(self._now + interval_ms, handle, callback)
        return handle

    def clear_interval(self, handle: TimerHandle) -> None:
        handle.cancel()

    def pending(self) -> int:
        """Number of live (uncancelled) timers."""
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def next_deadline(self) -> float | None:
        """Deadline of the earliest live timer, if any."""
        live = [due for due, _, handle, _ in self._queue if not handle.cancelled]
        return min(live) if live else None

    def advance(self, ms: float) -> None:
        """Move time forward by ms, running every callback that becomes due."""
        if ms < 0:
            raise ValueError("Cannot move a clock backwards")
        target = self._now + ms

        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = due
            if handle.interval_ms is not None:
                self._push(due + handle.interval_ms, handle, callback, count=False)
            callback()

        self._now = target

    def advance_to(self, timestamp_ms: float) -> None:
        """Move time forward to an absolute timestamp."""
        self.advance(timestamp_ms - self._now)

    def queued(self) -> int:
        """Number of queue entries, including cancelled ones not yet dropped."""
        return len(self._queue)

    def _push(
        self,
        due: float,
        handle: TimerHandle,
        callback: TimerCallback,
        count: bool = True,
    ) -> None:
        heapq.heappush(self._queue, (due, next(self._seq), handle, callback))
        if count:
            self.scheduled_count += 1
        if len(self._queue) > self._COMPACT_MIN and len(self._queue) > 2 * self.pending():
            self._compact()

    def _compact(self) -> None:
        self._queue = [entry for entry in self._queue if not entry[2].cancelled]
        heapq.heapify(self._queue)
