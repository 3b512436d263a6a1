"""Connection target parsing.

A target has the form ``[user@]host[:port][ subsystem]`` where ``host`` may
be a bracketed IPv6 literal such as ``[::1]``.

The user is split off at the rightmost ``@`` because hostnames never contain
one while user names (UPNs like ``alice@corp.example``) may. The subsystem is
split off at the rightmost space that is not inside IPv6 brackets.
"""

import ipaddress
from urllib.parse import urlsplit

from sshforge.models import DEFAULT_PORT, ConnectionDescriptor
from sshforge.utils.validation import validate_host_format, validate_port


class ParseError(ValueError):
    """Malformed connection target."""

    def __init__(self, message: str, fragment: str):
        """Initialize parse error.

        Args:
            message: What is wrong with the target
            fragment: The offending part of the target string
        """
        self.fragment = fragment
        super().__init__(f"{message}: {fragment!r}")


def parse_target(target: str) -> ConnectionDescriptor:
    """Parse a connection target string.

    Returns:
        ConnectionDescriptor with the host exactly as written by the caller.

    Raises:
        ParseError: If the target is empty, has unbalanced IPv6 brackets, an
            invalid host or an out of range port.
    """
    raw = target.strip()
    if not raw:
        raise ParseError("Target cannot be empty", target)

    user: str | None = None
    remainder = raw
    user_idx = raw.rfind("@")
    if user_idx != -1:
        user = raw[:user_idx]
        remainder = raw[user_idx + 1 :]
        if not user:
            raise ParseError("User name cannot be empty", raw)

    # Only spaces after a closing bracket may separate the subsystem
    search_from = 0
    if remainder.startswith("["):
        close_idx = remainder.find("]")
        if close_idx == -1:
            raise ParseError("Unbalanced brackets in IPv6 host", remainder)
        search_from = close_idx + 1

    subsystem: str | None = None
    space_idx = remainder.rfind(" ", search_from)
    if space_idx != -1:
        subsystem = remainder[space_idx + 1 :]
        remainder = remainder[:space_idx].rstrip()

    host, port = _parse_host_port(remainder)
    try:
        return ConnectionDescriptor(host=host, port=port, user=user, subsystem=subsystem)
    except ValueError as e:
        raise ParseError(str(e), raw) from e


def _parse_host_port(hostport: str) -> tuple[str, int]:
    """Split and validate ``host[:port]``, preserving the original host text."""
    if not hostport:
        raise ParseError("Host cannot be empty", hostport)

    is_ipv6 = hostport.startswith("[")
    if is_ipv6:
        close_idx = hostport.find("]")
        if close_idx == -1:
            raise ParseError("Unbalanced brackets in IPv6 host", hostport)
        trailer = hostport[close_idx + 1 :]
        if trailer and not trailer.startswith(":"):
            raise ParseError("Unexpected text after IPv6 host", trailer)
    else:
        host_part = hostport.rpartition(":")[0] if ":" in hostport else hostport
        try:
            validate_host_format(host_part)
        except ValueError as e:
            raise ParseError("Invalid host", host_part) from e

    try:
        parts = urlsplit(f"ssh://{hostport}")
        port = parts.port
    except ValueError as e:
        raise ParseError(f"Invalid host or port ({e})", hostport) from e

    if not parts.hostname:
        raise ParseError("Host cannot be empty", hostport)

    if port is None:
        port = DEFAULT_PORT
    try:
        validate_port(port)
    except ValueError as e:
        raise ParseError("Port out of range", hostport) from e

    # urlsplit lower-cases the host and strips IPv6 brackets, so return the
    # caller's own text instead.
    if is_ipv6:
        host = hostport[1 : hostport.index("]")]
        try:
            ipaddress.IPv6Address(host)
        except ValueError as e:
            raise ParseError("Invalid IPv6 address", host) from e
    else:
        host = host_part

    return host, port


def format_target(descriptor: ConnectionDescriptor) -> str:
    """Render a descriptor back into its canonical target string."""
    host = f"[{descriptor.host}]" if ":" in descriptor.host else descriptor.host
    target = host if descriptor.port == DEFAULT_PORT else f"{host}:{descriptor.port}"
    if descriptor.user is not None:
        target = f"{descriptor.user}@{target}"
    if descriptor.subsystem is not None:
        target = f"{target} {descriptor.subsystem}"
    return target
