"""Collaborators of the session manager: auth backends, storage, navigation."""

from sessionkeeper.providers.base import (
    ArtifactStore,
    AuthProvider,
    AuthSession,
    Navigator,
    Presenter,
    WarningPrompt,
)

__all__ = [
    "ArtifactStore",
    "AuthProvider",
    "AuthSession",
    "Navigator",
    "Presenter",
    "WarningPrompt",
]
