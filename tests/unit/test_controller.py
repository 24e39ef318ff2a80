"""Tests for the desktop host controller."""

import pygame
import pytest

from sessionkeeper.providers.local import LocalAuthProvider
from sessionkeeper.runtime.controller import AppScreen, RuntimeController, WindowConfig


class TestWindowConfig:
    """Tests for WindowConfig."""

    def test_default_values(self):
        """Test default window values."""
        config = WindowConfig()
        assert config.resolution == (800, 600)
        assert config.fps == 30

    def test_from_dict(self):
        """Test creating from dictionary."""
        config = WindowConfig.from_dict({"resolution": [1024, 768], "title": "Demo"})
        assert config.resolution == (1024, 768)
        assert config.title == "Demo"
        assert config.fps == 30


@pytest.fixture
def controller(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "auth:\n"
        "  provider: local\n"
        "storage:\n"
        f"  path: {tmp_path / 'storage.json'}\n"
    )
    c = RuntimeController(config_path=config_file)
    yield c
    c.session.destroy()


class TestRuntimeController:
    """Tests for RuntimeController without opening a window."""

    def test_local_auth_by_default(self, controller):
        """Test the local provider is built from the auth section."""
        assert isinstance(controller.auth, LocalAuthProvider)
        assert controller.screen == AppScreen.STARTING

    def test_unknown_provider(self, tmp_path):
        """Test an unknown auth provider is rejected."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("auth:\n  provider: ldap\n")

        with pytest.raises(ValueError):
            RuntimeController(config_path=config_file)

    def test_log_in_and_out(self, controller):
        """Test Enter logs in and L logs out back to the login screen."""
        controller._screen = AppScreen.LOGIN

        controller.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_RETURN))

        assert controller.screen == AppScreen.SESSION
        assert controller.session.is_initialized
        assert "supabase.auth.token" in controller.storage

        controller.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_l))

        assert controller.screen == AppScreen.LOGIN
        assert not controller.session.is_initialized
        assert "supabase.auth.token" not in controller.storage
        assert controller.auth.get_session() is None
