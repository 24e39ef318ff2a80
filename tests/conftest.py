"""Shared test fixtures."""

import threading
from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from sessionkeeper.config import SessionConfig
from sessionkeeper.providers.base import AuthSession
from sessionkeeper.providers.navigation import RouteNavigator
from sessionkeeper.providers.storage import MemoryArtifactStore
from sessionkeeper.runtime.clock import ManualClock
from sessionkeeper.runtime.events import EventBus
from sessionkeeper.session.manager import SessionManager, create_session_manager
from sessionkeeper.session.state import SessionContext
from sessionkeeper.ui.headless import HeadlessPresenter

# Far beyond any simulated time used in the tests
FAR_FUTURE_MS = 10.0**13


@pytest.fixture
def session_config() -> SessionConfig:
    """Create a test session configuration (5 min timeout, 1 min warning)."""
    return SessionConfig(
        session_timeout_ms=300_000,
        warning_lead_ms=60_000,
        check_interval_ms=30_000,
        tab_hidden_timeout_ms=120_000,
    )


@pytest.fixture
def clock() -> ManualClock:
    """Create a simulated clock starting at t=0."""
    return ManualClock()


@pytest.fixture
def auth() -> MagicMock:
    """Mock auth backend reporting a long-lived session."""
    mock = MagicMock()
    mock.get_session.return_value = AuthSession(expires_at_ms=FAR_FUTURE_MS, user_id="user-1")
    return mock


@pytest.fixture
def lock_is_free() -> Callable[[SessionContext], bool]:
    """Report whether another thread could take a session lock right now."""

    def check(ctx: SessionContext) -> bool:
        acquired: list[bool] = []

        def try_acquire() -> None:
            ok = ctx.lock.acquire(timeout=0.5)
            if ok:
                ctx.lock.release()
            acquired.append(ok)

        thread = threading.Thread(target=try_acquire)
        thread.start()
        thread.join()
        return acquired[0]

    return check


@pytest.fixture
def events() -> EventBus:
    return EventBus()


@pytest.fixture
def presenter() -> HeadlessPresenter:
    return HeadlessPresenter()


@pytest.fixture
def storage() -> MemoryArtifactStore:
    return MemoryArtifactStore({"supabase.auth.token": "token"})


@pytest.fixture
def navigator() -> RouteNavigator:
    return RouteNavigator()


@pytest.fixture
def manager(
    session_config: SessionConfig,
    auth: MagicMock,
    clock: ManualClock,
    events: EventBus,
    presenter: HeadlessPresenter,
    storage: MemoryArtifactStore,
    navigator: RouteNavigator,
) -> SessionManager:
    """Create an isolated session manager on simulated time."""
    m = create_session_manager(
        session_config,
        auth,
        clock=clock,
        events=events,
        presenter=presenter,
        storage=storage,
        navigator=navigator,
    )
    yield m  # type: ignore[misc]
    m.destroy()
