"""Warning prompt presenters and input adapters."""

from sessionkeeper.ui.headless import HeadlessPresenter

__all__ = ["HeadlessPresenter"]
