"""Tests for provider modules."""

import json
from unittest.mock import MagicMock, patch

import pytest

from sessionkeeper.errors import SessionConfigError
from sessionkeeper.providers.base import AuthSession
from sessionkeeper.providers.local import LocalAuthProvider
from sessionkeeper.providers.navigation import RouteNavigator
from sessionkeeper.providers.storage import FileArtifactStore, MemoryArtifactStore


class TestSupabaseAuthProvider:
    """Tests for Supabase auth provider."""

    @patch("sessionkeeper.providers.supabase.create_client")
    def test_from_settings(self, mock_create_client):
        """Test creating the client from URL and key."""
        from sessionkeeper.providers.supabase import SupabaseAuthProvider

        SupabaseAuthProvider.from_settings("https://example.supabase.co", "anon-key")

        mock_create_client.assert_called_once_with("https://example.supabase.co", "anon-key")

    @pytest.mark.parametrize("url,key", [(None, "anon-key"), ("https://x.supabase.co", "")])
    def test_from_settings_missing(self, url, key):
        """Test missing credentials are a configuration error."""
        from sessionkeeper.providers.supabase import SupabaseAuthProvider

        with pytest.raises(SessionConfigError):
            SupabaseAuthProvider.from_settings(url, key)

    def test_get_session_converts_seconds(self):
        """Test expires_at in seconds becomes milliseconds."""
        from sessionkeeper.providers.supabase import SupabaseAuthProvider

        client = MagicMock()
        client.auth.get_session.return_value = MagicMock(
            expires_at=1_700_000_000, user=MagicMock(id="user-42")
        )

        session = SupabaseAuthProvider(client).get_session()

        assert session == AuthSession(expires_at_ms=1_700_000_000_000, user_id="user-42")

    def test_get_session_none(self):
        """Test a signed-out client reports no session."""
        from sessionkeeper.providers.supabase import SupabaseAuthProvider

        client = MagicMock()
        client.auth.get_session.return_value = None

        assert SupabaseAuthProvider(client).get_session() is None

    def test_get_session_without_expiry(self):
        """Test a session with no expires_at keeps None."""
        from sessionkeeper.providers.supabase import SupabaseAuthProvider

        client = MagicMock()
        client.auth.get_session.return_value = MagicMock(expires_at=None, user=None)

        session = SupabaseAuthProvider(client).get_session()

        assert session is not None
        assert session.expires_at_ms is None
        assert session.user_id is None

    def test_sign_in_with_password(self):
        """Test password sign-in returns the new session."""
        from sessionkeeper.providers.supabase import SupabaseAuthProvider

        client = MagicMock()
        client.auth.sign_in_with_password.return_value = MagicMock(
            session=MagicMock(expires_at=100, user=MagicMock(id="u"))
        )

        session = SupabaseAuthProvider(client).sign_in_with_password("a@b.c", "secret")

        client.auth.sign_in_with_password.assert_called_once_with(
            {"email": "a@b.c", "password": "secret"}
        )
        assert session == AuthSession(expires_at_ms=100_000, user_id="u")

    def test_sign_out(self):
        """Test sign-out is forwarded to the client."""
        from sessionkeeper.providers.supabase import SupabaseAuthProvider

        client = MagicMock()
        SupabaseAuthProvider(client).sign_out()

        client.auth.sign_out.assert_called_once()


class TestLocalAuthProvider:
    """Tests for the in-process auth provider."""

    def test_sign_in_issues_session(self, clock):
        """Test a session expires after the configured lifetime."""
        clock.advance(1_000)
        provider = LocalAuthProvider(session_lifetime_ms=60_000, clock=clock)

        session = provider.sign_in("alice")

        assert session.expires_at_ms == 61_000
        assert session.user_id == "alice"
        assert provider.get_session() == session

    def test_generated_user_id(self, clock):
        """Test a user id is generated when none is given."""
        session = LocalAuthProvider(clock=clock).sign_in()

        assert session.user_id

    def test_sign_out(self, clock):
        """Test sign-out clears the session and tolerates repeats."""
        provider = LocalAuthProvider(clock=clock)
        provider.sign_in("alice")

        provider.sign_out()
        provider.sign_out()

        assert provider.get_session() is None
        assert provider.sign_out_count == 2


class TestArtifactStores:
    """Tests for the artifact stores."""

    def test_memory_store(self):
        """Test set, get and remove in memory."""
        store = MemoryArtifactStore({"a": 1})
        store.set("b", 2)
        store.remove("a")
        store.remove("missing")

        assert "a" not in store
        assert store.get("b") == 2
        assert store.get("a", "default") == "default"

    def test_file_store_persists(self, tmp_path):
        """Test values survive a new store on the same file."""
        path = tmp_path / "nested" / "storage.json"
        FileArtifactStore(path).set("supabase.auth.token", {"user_id": "u"})

        reopened = FileArtifactStore(path)

        assert reopened.get("supabase.auth.token") == {"user_id": "u"}
        assert json.loads(path.read_text()) == {"supabase.auth.token": {"user_id": "u"}}

    def test_file_store_remove(self, tmp_path):
        """Test removing a key rewrites the file and ignores missing keys."""
        path = tmp_path / "storage.json"
        store = FileArtifactStore(path)
        store.set("supabase.auth.token", "t")

        store.remove("supabase.auth.token")
        store.remove("supabase.auth.token")

        assert "supabase.auth.token" not in store
        assert json.loads(path.read_text()) == {}

    def test_file_store_missing_file(self, tmp_path):
        """Test a store without a file is empty."""
        store = FileArtifactStore(tmp_path / "absent.json")

        assert store.get("x") is None
        store.remove("x")
        assert not (tmp_path / "absent.json").exists()

    def test_file_store_corrupt_file(self, tmp_path):
        """Test a corrupt file is treated as empty."""
        path = tmp_path / "storage.json"
        path.write_text("{not json")

        assert FileArtifactStore(path).get("x") is None


class TestRouteNavigator:
    """Tests for RouteNavigator."""

    def test_navigate(self):
        """Test navigation records the route and notifies the listener."""
        listener = MagicMock()
        navigator = RouteNavigator(on_navigate=listener)

        navigator.navigate("/login")

        assert navigator.current_route == "/login"
        assert navigator.history == ["/", "/login"]
        listener.assert_called_once_with("/login")
