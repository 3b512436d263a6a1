"""Tests for environment settings."""

import pytest

from sshforge.config import Settings
from sshforge.config.settings import DEFAULT_REMOTE_COMMAND, DEFAULT_SUBSYSTEM

ENV_VARS = (
    "SSHFORGE_SSH_EXECUTABLE",
    "SSHFORGE_ASKPASS",
    "SSHFORGE_SUBSYSTEM",
    "SSHFORGE_REMOTE_COMMAND",
    "SSHFORGE_KNOWN_HOSTS",
    "SSHFORGE_CONNECT_TIMEOUT",
    "SSHFORGE_CLOSE_TIMEOUT",
    "SSHFORGE_LOG_LEVEL",
    "SSHFORGE_LOG_COLORS",
    "SSHFORGE_PASSWORD",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without SSHFORGE_* variables."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


def test_defaults():
    """Unset variables give the documented defaults."""
    settings = Settings.from_env()

    assert settings.executable is None
    assert settings.askpass_path is None
    assert settings.default_subsystem == DEFAULT_SUBSYSTEM == "powershell"
    assert settings.default_command == DEFAULT_REMOTE_COMMAND
    assert settings.known_hosts is None
    assert settings.connect_timeout == 30.0
    assert settings.close_timeout == 5.0
    assert settings.log_level == "INFO"
    assert settings.log_colors is True


def test_reads_environment(monkeypatch):
    """Every variable maps onto its field."""
    monkeypatch.setenv("SSHFORGE_SSH_EXECUTABLE", "hvc.exe")
    monkeypatch.setenv("SSHFORGE_ASKPASS", "/opt/sshforge/ask_pass.sh")
    monkeypatch.setenv("SSHFORGE_SUBSYSTEM", "pwsh")
    monkeypatch.setenv("SSHFORGE_REMOTE_COMMAND", "pwsh -NoLogo")
    monkeypatch.setenv("SSHFORGE_KNOWN_HOSTS", "none")
    monkeypatch.setenv("SSHFORGE_CONNECT_TIMEOUT", "7.5")
    monkeypatch.setenv("SSHFORGE_CLOSE_TIMEOUT", "1")
    monkeypatch.setenv("SSHFORGE_LOG_LEVEL", "debug")
    monkeypatch.setenv("SSHFORGE_LOG_COLORS", "off")

    settings = Settings.from_env()

    assert settings.executable == "hvc.exe"
    assert settings.askpass_path == "/opt/sshforge/ask_pass.sh"
    assert settings.default_subsystem == "pwsh"
    assert settings.default_command == "pwsh -NoLogo"
    assert settings.known_hosts == "none"
    assert settings.connect_timeout == 7.5
    assert settings.close_timeout == 1.0
    assert settings.log_level == "DEBUG"
    assert settings.log_colors is False


@pytest.mark.parametrize("value", ["abc", "0", "-3"])
def test_invalid_timeout_falls_back(monkeypatch, value):
    """Unparseable or non-positive timeouts use the default."""
    monkeypatch.setenv("SSHFORGE_CONNECT_TIMEOUT", value)
    assert Settings.from_env().connect_timeout == 30.0


@pytest.mark.parametrize("value", ["1", "true", "YES", "on"])
def test_truthy_colors(monkeypatch, value):
    """Common truthy spellings enable colors."""
    monkeypatch.setenv("SSHFORGE_LOG_COLORS", value)
    assert Settings.from_env().log_colors is True


def test_password_from_env(monkeypatch):
    """Password comes from SSHFORGE_PASSWORD and is not a settings field."""
    assert Settings.password_from_env() is None

    monkeypatch.setenv("SSHFORGE_PASSWORD", "hunter2")
    assert Settings.password_from_env() == "hunter2"
    assert "hunter2" not in repr(Settings.from_env())
