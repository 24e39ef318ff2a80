"""Pygame input adapter and warning prompt."""

from collections.abc import Callable

import pygame

from sessionkeeper.providers.base import WarningPrompt
from sessionkeeper.runtime.events import EventBus

# Pygame event type -> (event name, hidden flag)
_EVENT_MAP: dict[int, tuple[str, bool | None]] = {
    pygame.MOUSEBUTTONDOWN: ("mousedown", None),
    pygame.MOUSEBUTTONUP: ("click", None),
    pygame.MOUSEMOTION: ("mousemove", None),
    pygame.MOUSEWHEEL: ("scroll", None),
    pygame.KEYDOWN: ("keypress", None),
    pygame.FINGERDOWN: ("touchstart", None),
    pygame.WINDOWFOCUSLOST: ("blur", None),
    pygame.WINDOWFOCUSGAINED: ("focus", None),
    pygame.WINDOWHIDDEN: ("visibilitychange", True),
    pygame.WINDOWMINIMIZED: ("visibilitychange", True),
    pygame.WINDOWSHOWN: ("visibilitychange", False),
    pygame.WINDOWRESTORED: ("visibilitychange", False),
}


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Convert hex color to RGB tuple.

    Args:
        hex_color: Hex color string (e.g., "#10B981").

    Returns:
        RGB tuple.
    """
    hex_color = hex_color.lstrip("#")
    return tuple(int(hex_color[i : i + 2], 16) for i in (0, 2, 4))  # type: ignore[return-value]


class PygameEventSource(EventBus):
    """Event bus fed from the pygame event queue."""

    def dispatch(self, event: pygame.event.Event) -> str | None:
        """Translate a pygame event and deliver it to registered handlers.

        Args:
            event: Event from ``pygame.event.get()``.

        Returns:
            The translated event name, or None if the event is not tracked.
        """
        mapped = _EVENT_MAP.get(event.type)
        if mapped is None:
            return None
        name, hidden = mapped
        self.emit(name, hidden=hidden)
        return name


class PygamePresenter:
    """Draws the session-expiring prompt as a modal over the current frame."""

    COLORS = {
        "panel": "#FFFFFF",
        "title": "#F59E0B",
        "text": "#6B7280",
        "extend": "#10B981",
        "logout": "#EF4444",
        "button_text": "#FFFFFF",
    }

    PANEL_WIDTH = 400
    PANEL_HEIGHT = 220
    BUTTON_SIZE = (160, 40)

    def __init__(self, resolution: tuple[int, int] = (800, 600)) -> None:
        """Initialize the presenter.

        Args:
            resolution: Size of the surface the prompt is drawn on.
        """
        self.resolution = resolution
        self.prompt: WarningPrompt | None = None
        self._on_extend: Callable[[], None] | None = None
        self._on_logout_now: Callable[[], None] | None = None
        self._fonts: dict[int, pygame.font.Font] = {}
        self._calculate_layout()

    @property
    def is_visible(self) -> bool:
        return self.prompt is not None

    def _calculate_layout(self) -> None:
        """Calculate panel and button positions based on resolution."""
        w, h = self.resolution
        self.panel_rect = pygame.Rect(
            (w - self.PANEL_WIDTH) // 2,
            (h - self.PANEL_HEIGHT) // 2,
            self.PANEL_WIDTH,
            self.PANEL_HEIGHT,
        )

        button_w, button_h = self.BUTTON_SIZE
        gap = 16
        top = self.panel_rect.bottom - button_h - 24
        left = self.panel_rect.centerx - button_w - gap // 2
        self.extend_rect = pygame.Rect(left, top, button_w, button_h)
        self.logout_rect = pygame.Rect(left + button_w + gap, top, button_w, button_h)

    def show(
        self,
        prompt: WarningPrompt,
        on_extend: Callable[[], None],
        on_logout_now: Callable[[], None],
    ) -> None:
        self.prompt = prompt
        self._on_extend = on_extend
        self._on_logout_now = on_logout_now

    def hide(self) -> None:
        self.prompt = None

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Route an event to the prompt.

        Mouse events over the panel belong to the prompt, so moving to a
        button does not count as activity that would dismiss it.

        Args:
            event: Pygame event.

        Returns:
            True if the prompt consumed the event.
        """
        if self.prompt is None:
            return False

        if event.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP):
            if not self.panel_rect.collidepoint(event.pos):
                return False
            if event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                if self.extend_rect.collidepoint(event.pos) and self._on_extend is not None:
                    self._on_extend()
                elif self.logout_rect.collidepoint(event.pos) and self._on_logout_now is not None:
                    self._on_logout_now()
            return True
        elif event.type == pygame.KEYDOWN and event.key == pygame.K_RETURN:
            if self._on_extend is not None:
                self._on_extend()
                return True

        return False

    def render(self, surface: pygame.Surface) -> None:
        """Render the prompt, if shown, on top of a surface.

        Args:
            surface: Pygame surface to render to.
        """
        prompt = self.prompt
        if prompt is None:
            return

        # Dim the page behind the modal
        overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 128))
        surface.blit(overlay, (0, 0))

        panel_color = hex_to_rgb(self.COLORS["panel"])
        pygame.draw.rect(surface, panel_color, self.panel_rect, border_radius=8)

        title = self._font(30).render(prompt.title, True, hex_to_rgb(self.COLORS["title"]))
        title_pos = (self.panel_rect.centerx, self.panel_rect.top + 20)
        surface.blit(title, title.get_rect(midtop=title_pos))

        body_font = self._font(20)
        y = self.panel_rect.top + 60
        for line in self._wrap(prompt.message, body_font, self.PANEL_WIDTH - 48):
            text = body_font.render(line, True, hex_to_rgb(self.COLORS["text"]))
            surface.blit(text, text.get_rect(midtop=(self.panel_rect.centerx, y)))
            y += body_font.get_linesize()

        self._draw_button(surface, self.extend_rect, prompt.extend_label, self.COLORS["extend"])
        self._draw_button(surface, self.logout_rect, prompt.logout_label, self.COLORS["logout"])

    def _draw_button(
        self, surface: pygame.Surface, rect: pygame.Rect, label: str, color: str
    ) -> None:
        pygame.draw.rect(surface, hex_to_rgb(color), rect, border_radius=4)
        text = self._font(22).render(label, True, hex_to_rgb(self.COLORS["button_text"]))
        surface.blit(text, text.get_rect(center=rect.center))

    def _font(self, size: int) -> pygame.font.Font:
        if not pygame.font.get_init():
            pygame.font.init()
        if size not in self._fonts:
            self._fonts[size] = pygame.font.Font(None, size)
        return self._fonts[size]

    @staticmethod
    def _wrap(text: str, font: pygame.font.Font, max_width: int) -> list[str]:
        lines: list[str] = []
        current = ""
        for word in text.split():
            candidate = f"{current} {word}".strip()
            if font.size(candidate)[0] <= max_width or not current:
                current = candidate
            else:
                lines.append(current)
                current = word
        if current:
            lines.append(current)
        return lines
