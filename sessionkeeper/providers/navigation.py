"""Route navigation."""

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class RouteNavigator:
    """Keeps track of the current route and notifies a listener on change."""

    def __init__(
        self,
        initial_route: str = "/",
        on_navigate: Callable[[str], None] | None = None,
    ) -> None:
        self.current_route = initial_route
        self.history: list[str] = [initial_route]
        self._on_navigate = on_navigate

    def navigate(self, route: str) -> None:
        logger.info("Navigating to %s", route)
        self.current_route = route
        self.history.append(route)
        if self._on_navigate is not None:
            self._on_navigate(route)
