"""Session manager facade and the process-wide instance."""

import logging
import threading
from collections.abc import Callable
from pathlib import Path

from sessionkeeper.config import SessionConfig, load_config
from sessionkeeper.errors import SessionStateError
from sessionkeeper.providers.base import ArtifactStore, AuthProvider, Navigator, Presenter
from sessionkeeper.providers.navigation import RouteNavigator
from sessionkeeper.providers.storage import MemoryArtifactStore
from sessionkeeper.runtime.clock import Clock, SystemClock
from sessionkeeper.runtime.events import EventBus, EventSource
from sessionkeeper.session.activity import ActivityMonitor
from sessionkeeper.session.expiry import ExpiryHandler
from sessionkeeper.session.state import SessionContext, SessionPhase
from sessionkeeper.session.timers import TimerScheduler
from sessionkeeper.session.validator import SessionValidator
from sessionkeeper.session.visibility import VisibilityMonitor
from sessionkeeper.session.warning import WarningPresenter
from sessionkeeper.ui.headless import HeadlessPresenter

logger = logging.getLogger(__name__)


class SessionManager:
    """Single entry point for session lifecycle management.

    Wires the activity and visibility monitors, the timer scheduler, the
    backend validator, the warning prompt and the expiry handler around one
    shared context. One ``initialize()`` starts an epoch; ``destroy()`` or an
    expiry ends it.
    """

    def __init__(
        self,
        config: SessionConfig,
        auth: AuthProvider,
        clock: Clock | None = None,
        events: EventSource | None = None,
        presenter: Presenter | None = None,
        storage: ArtifactStore | None = None,
        navigator: Navigator | None = None,
    ) -> None:
        """Initialize the session manager.

        Args:
            config: Session timeouts and event names.
            auth: Auth backend to revalidate against and sign out of.
            clock: Time source. Defaults to the system clock.
            events: Source of activity and visibility events.
            presenter: UI for the warning prompt. Defaults to headless.
            storage: Store holding persisted session artifacts.
            navigator: Used for the default redirect to the login route.
        """
        self.config = config
        self.events: EventSource = events if events is not None else EventBus()
        self.presenter: Presenter = presenter if presenter is not None else HeadlessPresenter()
        self.navigator: Navigator = navigator if navigator is not None else RouteNavigator()

        self._ctx = SessionContext(config=config, clock=clock or SystemClock())

        self._scheduler = TimerScheduler(
            self._ctx,
            on_warning=lambda: self._warning.show(),
            on_expiry=self._expiry_due,
            on_check=lambda: self._validator.check(),
            hide_warning=lambda: self._warning.hide(),
        )
        self._warning = WarningPresenter(
            self._ctx,
            self.presenter,
            on_extend=self.extend_session,
            on_logout_now=lambda: self._expiry.handle_expiry(),
        )
        self._expiry = ExpiryHandler(
            self._ctx,
            self._scheduler,
            self._warning,
            auth=auth,
            storage=storage if storage is not None else MemoryArtifactStore(),
            navigator=self.navigator,
            detach_listeners=self._detach_monitors,
        )
        self._validator = SessionValidator(
            self._ctx,
            auth,
            on_invalid=self._expiry_due,
        )
        self._activity = ActivityMonitor(self._ctx, self.events, on_activity=self._renew)
        self._visibility = VisibilityMonitor(
            self._ctx,
            self.events,
            self._scheduler,
            on_expire=self._expiry_due,
        )

    @property
    def phase(self) -> SessionPhase:
        return self._ctx.phase

    @property
    def is_initialized(self) -> bool:
        """True while an epoch is running."""
        return self._ctx.running

    @property
    def is_warning_shown(self) -> bool:
        return self._warning.is_shown

    @property
    def scheduler(self) -> TimerScheduler:
        return self._scheduler

    @property
    def validator(self) -> SessionValidator:
        return self._validator

    def initialize(
        self,
        on_expired: Callable[[], None] | None = None,
        on_warning: Callable[[], None] | None = None,
    ) -> None:
        """Start a session epoch.

        Args:
            on_expired: Called after expiry instead of redirecting to login.
            on_warning: Called when the expiring-soon prompt is shown.

        Raises:
            SessionConfigError: If the configuration is inconsistent.
            SessionStateError: If an epoch is already running.
        """
        self.config.validate()

        with self._ctx.lock:
            if self._ctx.running:
                raise SessionStateError(
                    "Session manager is already initialized; call destroy() first"
                )

            self._ctx.on_expired = on_expired
            self._ctx.on_warning = on_warning
            self._ctx.begin_epoch()

            self._activity.attach()
            self._visibility.attach()
            self._scheduler.start_session_timers()
            self._scheduler.start_periodic_check()

        timeouts = self.config.describe()
        logger.info(
            "Session started (timeout %s, tab switch %s)",
            timeouts["session_timeout"],
            timeouts["tab_switch_timeout"],
        )

    def extend_session(self) -> None:
        """Treat the call as user activity: restart the full timeout window."""
        with self._ctx.lock:
            if not self._ctx.live:
                logger.debug("extend_session() ignored, no active session")
                return
            if not self.config.security.allow_extension:
                logger.info("Session extension is disabled")
                return
            self._renew()

    def logout(self) -> bool:
        """End the session now.

        Returns:
            True if this call ended the session.
        """
        return self._expiry.handle_expiry()

    def get_time_until_expiry(self) -> float:
        """Milliseconds left before the inactivity timeout, never negative."""
        with self._ctx.lock:
            if not self._ctx.live:
                return 0.0
            elapsed = self._ctx.clock.now() - self._ctx.state.last_activity_at
            return max(0.0, self.config.session_timeout_ms - elapsed)

    def is_session_expiring_soon(self) -> bool:
        return self.get_time_until_expiry() <= self.config.warning_lead_ms

    def destroy(self) -> None:
        """Cancel every timer, hide the prompt and remove every listener."""
        with self._ctx.lock:
            self._scheduler.cancel_all()
            self._warning.hide()
            self._detach_monitors()
            if self._ctx.running:
                self._ctx.end_epoch()
        logger.debug("Session manager destroyed")

    def _renew(self) -> None:
        with self._ctx.lock:
            self._ctx.state.last_activity_at = self._ctx.clock.now()
            self._scheduler.reset_session_timers()

    def _expiry_due(self, still_due: Callable[[], bool]) -> None:
        self._expiry.handle_expiry(still_due)

    def _detach_monitors(self) -> None:
        self._activity.detach()
        self._visibility.detach()


def create_session_manager(
    config: SessionConfig,
    auth: AuthProvider,
    clock: Clock | None = None,
    events: EventSource | None = None,
    presenter: Presenter | None = None,
    storage: ArtifactStore | None = None,
    navigator: Navigator | None = None,
) -> SessionManager:
    """Create an isolated session manager."""
    return SessionManager(
        config=config,
        auth=auth,
        clock=clock,
        events=events,
        presenter=presenter,
        storage=storage,
        navigator=navigator,
    )


_instance: SessionManager | None = None
_instance_lock = threading.Lock()


def get_session_manager(config_path: Path | None = None) -> SessionManager:
    """Return the process-wide session manager, creating it on first use.

    The lazily created instance reads its settings from the config file and
    talks to Supabase using credentials from the environment.
    """
    global _instance
    with _instance_lock:
        if _instance is None:
            from sessionkeeper.providers.supabase import SupabaseAuthProvider

            app_config = load_config(config_path)
            supabase = app_config.get("supabase", {})
            _instance = create_session_manager(
                SessionConfig.from_dict(app_config["session"]),
                SupabaseAuthProvider.from_settings(supabase.get("url"), supabase.get("key")),
            )
        return _instance


def set_session_manager(manager: SessionManager | None) -> None:
    """Install a manager as the process-wide instance."""
    global _instance
    with _instance_lock:
        _instance = manager


def reset_session_manager() -> None:
    """Destroy and drop the process-wide instance."""
    global _instance
    with _instance_lock:
        if _instance is not None:
            _instance.destroy()
        _instance = None


def initialize_session_manager(
    on_expired: Callable[[], None] | None = None,
    on_warning: Callable[[], None] | None = None,
) -> None:
    get_session_manager().initialize(on_expired, on_warning)


def extend_session() -> None:
    get_session_manager().extend_session()


def logout() -> bool:
    return get_session_manager().logout()


def get_time_until_expiry() -> float:
    return get_session_manager().get_time_until_expiry()


def is_session_expiring_soon() -> bool:
    return get_session_manager().is_session_expiring_soon()
