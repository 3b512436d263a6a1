"""sshforge: line-oriented remote sessions over SSH."""

from sshforge.models import ConnectionDescriptor, Credential, SessionOptions, TransportState
from sshforge.protocols import EOF, SessionTransport
from sshforge.services import (
    ConfigurationError,
    ConnectFailure,
    LibrarySessionTransport,
    ProcessTransport,
    ResourceMissing,
    SecretHandoffStore,
    SecretNotFound,
    TransportError,
    TransportStateError,
    create_library_transport,
    create_process_transport,
    get_handoff_store,
)
from sshforge.utils import ParseError, configure_logging, format_target, parse_target

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ConnectFailure",
    "ConnectionDescriptor",
    "Credential",
    "EOF",
    "LibrarySessionTransport",
    "ParseError",
    "ProcessTransport",
    "ResourceMissing",
    "SecretHandoffStore",
    "SecretNotFound",
    "SessionOptions",
    "SessionTransport",
    "TransportError",
    "TransportState",
    "TransportStateError",
    "configure_logging",
    "create_library_transport",
    "create_process_transport",
    "format_target",
    "get_handoff_store",
    "parse_target",
]
