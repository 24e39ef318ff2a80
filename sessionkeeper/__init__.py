"""Session lifecycle management: inactivity, tab-hidden and backend expiry."""

__version__ = "0.1.0"
