"""Tests for transport factories."""

import pytest

from sshforge.config import Settings
from sshforge.models import Credential, SessionOptions
from sshforge.services.factory import create_library_transport, create_process_transport
from sshforge.services.library import LibrarySessionTransport
from sshforge.services.process import ProcessTransport
from sshforge.services.state import reset_state, set_settings


@pytest.fixture(autouse=True)
def fresh_state(monkeypatch):
    monkeypatch.delenv("SSHFORGE_PASSWORD", raising=False)
    reset_state()
    yield
    reset_state()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        executable="hvc.exe",
        askpass_path="/opt/ask_pass.sh",
        default_subsystem="pwsh",
        default_command="pwsh -NoLogo",
        close_timeout=2.0,
        connect_timeout=9.0,
    )


def test_process_transport_from_settings(settings):
    """Settings flow into the process transport."""
    transport = create_process_transport(SessionOptions(host="server"), settings)

    assert isinstance(transport, ProcessTransport)
    assert transport.arguments[:2] == ["hvc.exe", "ssh"]
    assert transport.arguments[-1] == "pwsh"


def test_process_transport_uses_global_settings(settings):
    """Without explicit settings the global instance is used."""
    set_settings(settings)
    transport = create_process_transport(SessionOptions(host="server"))
    assert transport.arguments[0] == "hvc.exe"


def test_library_transport_password_from_env(monkeypatch, settings):
    """A password-less credential picks up SSHFORGE_PASSWORD."""
    monkeypatch.setenv("SSHFORGE_PASSWORD", "hunter2")
    options = SessionOptions(host="server", credential=Credential("admin"))

    transport = create_library_transport(options, settings)

    assert isinstance(transport, LibrarySessionTransport)
    assert transport.options.password == "hunter2"
    assert transport.options.user == "admin"
    assert options.password is None


def test_library_transport_explicit_password_wins(monkeypatch, settings):
    """An explicit password is not replaced by the environment."""
    monkeypatch.setenv("SSHFORGE_PASSWORD", "from-env")
    options = SessionOptions(host="server", credential=Credential("admin", "explicit"))

    transport = create_library_transport(options, settings)

    assert transport.options.password == "explicit"
