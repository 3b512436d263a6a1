"""sshforge settings.

Every knob comes from an ``SSHFORGE_*`` environment variable; unset or
invalid values fall back to the defaults below.
"""

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_SUBSYSTEM = "powershell"
DEFAULT_REMOTE_COMMAND = "pwsh -NoProfile -SSHServerMode"
PASSWORD_ENV = "SSHFORGE_PASSWORD"


@dataclass
class Settings:
    """Transport defaults, timeouts and logging options."""

    # External ssh client
    executable: str | None = field(default=None)
    askpass_path: str | None = field(default=None)
    default_subsystem: str = field(default=DEFAULT_SUBSYSTEM)

    # In-process ssh client
    default_command: str = field(default=DEFAULT_REMOTE_COMMAND)
    known_hosts: str | None = field(default=None)

    # Timeouts (seconds)
    connect_timeout: float = field(default=30.0)
    close_timeout: float = field(default=5.0)

    # Logging
    log_level: str = field(default="INFO")
    log_colors: bool = field(default=True)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from SSHFORGE_* environment variables.

        Returns:
            Settings instance with values from environment
        """
        return cls(
            executable=os.getenv("SSHFORGE_SSH_EXECUTABLE") or None,
            askpass_path=os.getenv("SSHFORGE_ASKPASS") or None,
            default_subsystem=os.getenv("SSHFORGE_SUBSYSTEM") or DEFAULT_SUBSYSTEM,
            default_command=os.getenv("SSHFORGE_REMOTE_COMMAND") or DEFAULT_REMOTE_COMMAND,
            known_hosts=os.getenv("SSHFORGE_KNOWN_HOSTS") or None,
            connect_timeout=cls._get_float("SSHFORGE_CONNECT_TIMEOUT", 30.0),
            close_timeout=cls._get_float("SSHFORGE_CLOSE_TIMEOUT", 5.0),
            log_level=os.getenv("SSHFORGE_LOG_LEVEL", "INFO").upper(),
            log_colors=cls._get_bool("SSHFORGE_LOG_COLORS", True),
        )

    @staticmethod
    def _get_float(key: str, default: float) -> float:
        """Get a positive number from environment.

        Args:
            key: Environment variable key
            default: Default value if not set or invalid

        Returns:
            Float value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            number = float(value)
        except ValueError:
            logger.warning("Invalid number for %s: %s, using default %s", key, value, default)
            return default

        if number <= 0:
            logger.warning("%s must be > 0, got %s. Using default: %s", key, value, default)
            return default
        return number

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        """Get boolean from environment.

        Args:
            key: Environment variable key
            default: Default value if not set

        Returns:
            Boolean value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")

    @staticmethod
    def password_from_env() -> str | None:
        """Read a session password from SSHFORGE_PASSWORD.

        The value is returned as-is and never logged.
        """
        return os.getenv(PASSWORD_ENV) or None
