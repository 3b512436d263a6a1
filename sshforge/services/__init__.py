"""Services for sshforge."""

from sshforge.services.errors import (
    ConfigurationError,
    ConnectFailure,
    ResourceMissing,
    TransportError,
    TransportStateError,
)
from sshforge.services.factory import create_library_transport, create_process_transport
from sshforge.services.handoff import SecretHandoffStore, SecretNotFound
from sshforge.services.library import LibrarySessionTransport
from sshforge.services.lifecycle import Lifecycle, TransportState
from sshforge.services.process import ProcessTransport, build_ssh_arguments
from sshforge.services.state import (
    get_handoff_store,
    get_settings,
    reset_state,
    set_handoff_store,
    set_settings,
)

__all__ = [
    "ConfigurationError",
    "ConnectFailure",
    "Lifecycle",
    "LibrarySessionTransport",
    "ProcessTransport",
    "ResourceMissing",
    "SecretHandoffStore",
    "SecretNotFound",
    "TransportError",
    "TransportState",
    "TransportStateError",
    "build_ssh_arguments",
    "create_library_transport",
    "create_process_transport",
    "get_handoff_store",
    "get_settings",
    "reset_state",
    "set_handoff_store",
    "set_settings",
]
