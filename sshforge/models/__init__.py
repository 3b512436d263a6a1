"""Data models for sshforge."""

from sshforge.models.descriptor import DEFAULT_PORT, ConnectionDescriptor, Credential
from sshforge.models.options import SessionOptions
from sshforge.models.state import TransportState

__all__ = [
    "ConnectionDescriptor",
    "Credential",
    "DEFAULT_PORT",
    "SessionOptions",
    "TransportState",
]
