"""Build transports from settings.

Deciding which transport a caller wants is left to the caller; these helpers
only wire settings into the constructors.
"""

import dataclasses

from sshforge.config import Settings
from sshforge.models import Credential, SessionOptions
from sshforge.services.library import LibrarySessionTransport
from sshforge.services.process import ProcessTransport
from sshforge.services.state import get_settings


def create_process_transport(
    options: SessionOptions,
    settings: Settings | None = None,
) -> ProcessTransport:
    """Create a transport that spawns the external ssh client."""
    settings = settings or get_settings()
    return ProcessTransport(
        options,
        askpass_path=settings.askpass_path,
        executable=settings.executable,
        default_subsystem=settings.default_subsystem,
        close_timeout=settings.close_timeout,
    )


def create_library_transport(
    options: SessionOptions,
    settings: Settings | None = None,
) -> LibrarySessionTransport:
    """Create a transport that uses the in-process ssh client.

    A credential without a password picks one up from SSHFORGE_PASSWORD.

    Raises:
        ConfigurationError: If options carry no user name
    """
    settings = settings or get_settings()
    if options.user and options.password is None:
        password = Settings.password_from_env()
        if password is not None:
            options = dataclasses.replace(
                options, credential=Credential(options.user, password)
            )

    return LibrarySessionTransport(
        options,
        known_hosts=settings.known_hosts,
        default_command=settings.default_command,
        connect_timeout=settings.connect_timeout,
        close_timeout=settings.close_timeout,
    )
