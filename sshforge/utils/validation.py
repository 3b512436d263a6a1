"""Host and port validation utilities."""

import re
import unicodedata
from typing import Final

# Characters that never appear in a hostname and could enable injection
# into an ssh argument vector or a remote shell.
INVALID_HOST_CHARS: Final[tuple[str, ...]] = (
    "/", "\\", ";", "&", "|", "$", "`", "?", "#", "[", "]",
    "'", '"', "@", " ", "\t", "\n", "\r", "\x00",
)

MALFORMED_ESCAPE: Final = re.compile(r"%(?![0-9A-Fa-f]{2})")


def validate_host_format(host: str) -> str:
    """Validate a plain (non-IPv6) host name.

    Args:
        host: The host name to validate

    Returns:
        The host name, unchanged

    Raises:
        ValueError: If the host name is empty, too long, contains invalid
            characters or carries a malformed percent escape
    """
    if not host:
        raise ValueError("Host cannot be empty")

    if len(host) > 253:
        raise ValueError(f"Host name too long: {len(host)} chars")

    if host.startswith("-"):
        raise ValueError(f"Host cannot start with '-': {host!r}")

    # Compatibility forms such as U+FF20 normalize to separators
    normalized = unicodedata.normalize("NFKC", host)
    for char in (*INVALID_HOST_CHARS, ":"):
        if char in host or char in normalized:
            raise ValueError(f"Host contains invalid characters: {host!r}")

    if MALFORMED_ESCAPE.search(host):
        raise ValueError(f"Host contains a malformed escape: {host!r}")

    return host


def validate_port(port: int) -> int:
    """Validate a TCP port number.

    Raises:
        ValueError: If port is outside 1-65535
    """
    if not 1 <= port <= 65535:
        raise ValueError(f"Port out of range (1-65535): {port}")
    return port
