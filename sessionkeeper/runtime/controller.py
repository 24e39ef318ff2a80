"""Desktop host that runs the session manager inside a pygame window."""

import logging
import os
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Any

import pygame

from sessionkeeper.config import SessionConfig, load_config
from sessionkeeper.providers.base import AuthProvider, AuthSession
from sessionkeeper.providers.local import LocalAuthProvider
from sessionkeeper.providers.navigation import RouteNavigator
from sessionkeeper.providers.storage import FileArtifactStore
from sessionkeeper.providers.supabase import SupabaseAuthProvider
from sessionkeeper.runtime.clock import SystemClock
from sessionkeeper.session.manager import SessionManager, create_session_manager
from sessionkeeper.session.status import SessionStatus
from sessionkeeper.ui.pygame_ui import PygameEventSource, PygamePresenter, hex_to_rgb

logger = logging.getLogger(__name__)


class AppScreen(Enum):
    """Screens of the desktop host."""

    STARTING = auto()
    LOGIN = auto()
    SESSION = auto()
    STOPPING = auto()


@dataclass
class WindowConfig:
    """Window configuration."""

    resolution: tuple[int, int] = (800, 600)
    fps: int = 30
    title: str = "sessionkeeper"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WindowConfig":
        """Create from dictionary."""
        res = data.get("resolution", [800, 600])
        resolution: tuple[int, int] = (int(res[0]), int(res[1])) if res else (800, 600)
        return cls(
            resolution=resolution,
            fps=int(data.get("fps", 30)),
            title=str(data.get("title", "sessionkeeper")),
        )


class RuntimeController:
    """Owns the window, the login flow and the session manager."""

    BACKGROUND = "#2D2D2D"
    TEXT = "#E5E7EB"
    WARNING_TEXT = "#F59E0B"

    def __init__(self, config_path: Path | None = None) -> None:
        """Initialize the runtime controller.

        Args:
            config_path: Path to configuration YAML file.
        """
        self.config = load_config(config_path)
        self.window = WindowConfig.from_dict(self.config.get("window", {}))
        self.session_config = SessionConfig.from_dict(self.config.get("session", {}))
        self.session_config.validate()

        self._screen = AppScreen.STARTING
        self._running = False

        # Pygame state (initialized in start())
        self._surface: pygame.Surface | None = None
        self._frame_clock: pygame.time.Clock | None = None
        self._fonts: dict[int, pygame.font.Font] = {}

        self.events = PygameEventSource()
        self.presenter = PygamePresenter(self.window.resolution)
        self.navigator = RouteNavigator(
            initial_route=self.session_config.login_route,
            on_navigate=self._on_navigate,
        )
        self.auth = self._build_auth(self.config.get("auth", {}))
        storage_path = self.config.get("storage", {}).get("path", "data/local_storage.json")
        self.storage = FileArtifactStore(Path(storage_path))

        self.session: SessionManager = create_session_manager(
            self.session_config,
            self.auth,
            clock=SystemClock(),
            events=self.events,
            presenter=self.presenter,
            storage=self.storage,
            navigator=self.navigator,
        )

    @property
    def screen(self) -> AppScreen:
        return self._screen

    def _build_auth(self, auth_config: dict[str, Any]) -> AuthProvider:
        """Create the configured auth backend.

        Args:
            auth_config: The ``auth`` configuration section.

        Returns:
            Auth provider.
        """
        provider = str(auth_config.get("provider", "local"))
        if provider == "supabase":
            supabase = self.config.get("supabase", {})
            return SupabaseAuthProvider.from_settings(supabase.get("url"), supabase.get("key"))
        if provider == "local":
            return LocalAuthProvider(
                session_lifetime_ms=float(auth_config.get("session_lifetime_ms", 60 * 60 * 1000))
            )
        raise ValueError(f"Unknown auth provider: {provider}")

    def start(self) -> None:
        """Open the window and run the main loop."""
        self._running = True

        pygame.init()
        pygame.display.set_caption(self.window.title)
        self._surface = pygame.display.set_mode(self.window.resolution)
        self._frame_clock = pygame.time.Clock()
        self._screen = AppScreen.LOGIN

        logger.info("Started. Press Enter to log in, L to log out, ESC to quit.")
        self._main_loop()

    def stop(self) -> None:
        """Tear down the session manager and the window."""
        self._screen = AppScreen.STOPPING
        self._running = False
        self.session.destroy()
        pygame.quit()
        logger.info("Stopped.")

    def log_in(self) -> bool:
        """Obtain a session from the backend and start a session epoch.

        Returns:
            True if the user is now logged in.
        """
        try:
            session = self._sign_in()
        except Exception as e:
            logger.error("Login failed: %s", e)
            return False

        if session is None:
            logger.error("Login failed: backend returned no session")
            return False

        self.storage.set(
            self.session_config.storage_key,
            {"user_id": session.user_id, "expires_at_ms": session.expires_at_ms},
        )
        if self.session.is_initialized:
            self.session.destroy()
        self.session.initialize()
        self._screen = AppScreen.SESSION
        self.navigator.navigate("/")
        return True

    def _sign_in(self) -> AuthSession | None:
        if isinstance(self.auth, LocalAuthProvider):
            return self.auth.sign_in(os.getenv("SESSIONKEEPER_USER"))
        if isinstance(self.auth, SupabaseAuthProvider):
            return self.auth.sign_in_with_password(
                os.environ["SESSIONKEEPER_EMAIL"],
                os.environ["SESSIONKEEPER_PASSWORD"],
            )
        return self.auth.get_session()

    def _on_navigate(self, route: str) -> None:
        if route == self.session_config.login_route:
            self._screen = AppScreen.LOGIN

    def _main_loop(self) -> None:
        """Main render/event loop."""
        while self._running:
            if not self.process_events():
                break
            self._render()
            if self._frame_clock is not None:
                self._frame_clock.tick(self.window.fps)

        self.stop()

    def process_events(self) -> bool:
        """Process pending pygame events.

        Returns:
            True if should continue running, False to quit.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return False
            self.handle_event(event)
        return True

    def handle_event(self, event: pygame.event.Event) -> None:
        """Route one event to the prompt, the current screen or the session."""
        if self.presenter.handle_event(event):
            return

        if self._screen == AppScreen.LOGIN:
            if event.type == pygame.KEYDOWN and event.key == pygame.K_RETURN:
                self.log_in()
            return

        if self._screen == AppScreen.SESSION:
            if event.type == pygame.KEYDOWN and event.key == pygame.K_l:
                self.session.logout()
                return
            self.events.dispatch(event)

    def _render(self) -> None:
        if self._surface is None:
            return

        self._surface.fill(hex_to_rgb(self.BACKGROUND))

        if self._screen == AppScreen.LOGIN:
            self._draw_text("Press Enter to log in", 36, self.TEXT, 0)
        elif self._screen == AppScreen.SESSION:
            status = SessionStatus.from_manager(self.session)
            if status.visible:
                color = self.WARNING_TEXT if status.expiring_soon else self.TEXT
                self._draw_text(status.label, 48, color, -30)
            timeouts = self.session_config.describe()
            self._draw_text(
                f"Logout after {timeouts['session_timeout']} idle "
                f"or {timeouts['tab_switch_timeout']} away",
                22,
                self.TEXT,
                30,
            )

        self.presenter.render(self._surface)
        pygame.display.flip()

    def _draw_text(self, text: str, size: int, color: str, offset_y: int) -> None:
        if self._surface is None:
            return
        if size not in self._fonts:
            self._fonts[size] = pygame.font.Font(None, size)
        rendered = self._fonts[size].render(text, True, hex_to_rgb(color))
        w, h = self._surface.get_size()
        self._surface.blit(rendered, rendered.get_rect(center=(w // 2, h // 2 + offset_y)))
