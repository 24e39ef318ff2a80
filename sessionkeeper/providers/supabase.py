"""Supabase auth backend."""

import logging

from supabase import Client, create_client

from sessionkeeper.errors import SessionConfigError
from sessionkeeper.providers.base import AuthSession

logger = logging.getLogger(__name__)


class SupabaseAuthProvider:
    """Auth provider backed by a Supabase project."""

    def __init__(self, client: Client) -> None:
        """Initialize the provider.

        Args:
            client: Supabase client.
        """
        self._client = client

    @classmethod
    def from_settings(cls, url: str | None, key: str | None) -> "SupabaseAuthProvider":
        """Create a provider from project URL and API key.

        Args:
            url: Supabase project URL.
            key: Supabase anon or service key.

        Returns:
            SupabaseAuthProvider instance.

        Raises:
            SessionConfigError: If either setting is missing.
        """
        if not url or not key:
            raise SessionConfigError(
                "Supabase URL and key are required (set SUPABASE_URL and SUPABASE_KEY)"
            )
        return cls(create_client(url, key))

    def sign_in_with_password(self, email: str, password: str) -> AuthSession | None:
        """Sign in with email and password.

        Args:
            email: Account email.
            password: Account password.

        Returns:
            The new session, or None if the backend did not return one.
        """
        response = self._client.auth.sign_in_with_password({"email": email, "password": password})
        return self._to_session(response.session)

    def get_session(self) -> AuthSession | None:
        return self._to_session(self._client.auth.get_session())

    def sign_out(self) -> None:
        # Signing out without a stored session only clears local state
        self._client.auth.sign_out()
        logger.debug("Signed out of Supabase")

    @staticmethod
    def _to_session(session: object | None) -> AuthSession | None:
        if session is None:
            return None

        # Supabase reports expires_at in epoch seconds
        expires_at = getattr(session, "expires_at", None)
        user = getattr(session, "user", None)
        return AuthSession(
            expires_at_ms=float(expires_at) * 1000 if expires_at is not None else None,
            user_id=getattr(user, "id", None),
        )
