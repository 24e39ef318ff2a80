"""Shared session state."""

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto

from sessionkeeper.config import SessionConfig
from sessionkeeper.runtime.clock import Clock


class SessionPhase(Enum):
    """Session lifecycle phases."""

    ACTIVE = auto()
    WARNING_SHOWN = auto()
    EXPIRED = auto()  # Terminal until the next initialize()


@dataclass
class ClockState:
    """Activity and visibility timestamps, in clock milliseconds."""

    last_activity_at: float = 0.0
    last_tab_hidden_at: float | None = None
    tab_visible: bool = True


@dataclass
class SessionContext:
    """State shared by the session components of one manager.

    Every component entry point holds ``lock`` while it reads or mutates
    this object, so timer threads and input handlers never interleave.
    """

    config: SessionConfig
    clock: Clock
    state: ClockState = field(default_factory=ClockState)
    phase: SessionPhase = SessionPhase.ACTIVE
    epoch: int = 0
    running: bool = False
    on_expired: Callable[[], None] | None = None
    on_warning: Callable[[], None] | None = None
    lock: threading.RLock = field(default_factory=threading.RLock)

    @property
    def live(self) -> bool:
        """True while an epoch is running and has not expired."""
        return self.running and self.phase is not SessionPhase.EXPIRED

    def begin_epoch(self) -> None:
        """Reset clock state for a fresh epoch."""
        self.epoch += 1
        self.running = True
        self.phase = SessionPhase.ACTIVE
        self.state = ClockState(last_activity_at=self.clock.now())

    def end_epoch(self) -> None:
        """Mark the current epoch as finished."""
        self.epoch += 1
        self.running = False
