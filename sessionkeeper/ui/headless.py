"""Presenter without a user interface."""

import logging
from collections.abc import Callable

from sessionkeeper.providers.base import WarningPrompt

logger = logging.getLogger(__name__)


class HeadlessPresenter:
    """Keeps the warning prompt in memory and lets code press its buttons."""

    def __init__(self) -> None:
        self.prompt: WarningPrompt | None = None
        self.show_count = 0
        self._on_extend: Callable[[], None] | None = None
        self._on_logout_now: Callable[[], None] | None = None

    @property
    def is_visible(self) -> bool:
        return self.prompt is not None

    def show(
        self,
        prompt: WarningPrompt,
        on_extend: Callable[[], None],
        on_logout_now: Callable[[], None],
    ) -> None:
        self.prompt = prompt
        self.show_count += 1
        self._on_extend = on_extend
        self._on_logout_now = on_logout_now
        logger.warning("%s: %s", prompt.title, prompt.message)

    def hide(self) -> None:
        self.prompt = None

    def click_extend(self) -> None:
        """Press "Stay Logged In". Ignored when no prompt is shown."""
        if self.prompt is not None and self._on_extend is not None:
            self._on_extend()

    def click_logout_now(self) -> None:
        """Press "Logout Now". Ignored when no prompt is shown."""
        if self.prompt is not None and self._on_logout_now is not None:
            self._on_logout_now()
