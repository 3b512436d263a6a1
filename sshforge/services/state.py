"""Global state management for sshforge."""

import atexit

from sshforge.config import Settings
from sshforge.services.handoff import SecretHandoffStore

# Global state (initialized on first access)
_settings: Settings | None = None
_store: SecretHandoffStore | None = None


def get_settings() -> Settings:
    """Get or create settings from the environment."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def get_handoff_store() -> SecretHandoffStore:
    """Get or create the process-wide handoff store."""
    global _store
    if _store is None:
        _store = SecretHandoffStore()
        atexit.register(_store.clear)
    return _store


def reset_state() -> None:
    """Reset global state for testing.

    Clears any stored secrets and drops the singleton instances, allowing
    tests to start with fresh state.
    """
    global _settings, _store
    if _store is not None:
        _store.clear()
    _settings = None
    _store = None


def set_settings(settings: Settings) -> None:
    """Set the global settings instance.

    Args:
        settings: Settings instance to use globally.
    """
    global _settings
    _settings = settings


def set_handoff_store(store: SecretHandoffStore) -> None:
    """Set the global handoff store instance.

    Args:
        store: SecretHandoffStore instance to use globally.
    """
    global _store
    _store = store
