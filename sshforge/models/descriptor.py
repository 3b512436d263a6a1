"""Connection target data models."""

import ipaddress
from dataclasses import dataclass, field

DEFAULT_PORT = 22


@dataclass(frozen=True)
class ConnectionDescriptor:
    """Parsed connection target.

    Every descriptor that constructs successfully renders to a target string
    that parses back to an equal descriptor.
    """

    host: str
    port: int = DEFAULT_PORT
    user: str | None = None
    subsystem: str | None = None

    def __post_init__(self) -> None:
        from sshforge.utils.validation import validate_host_format, validate_port

        if not self.host:
            raise ValueError("Host cannot be empty")
        if ":" in self.host:
            try:
                ipaddress.IPv6Address(self.host)
            except ValueError as e:
                raise ValueError(f"Invalid IPv6 address: {self.host!r}") from e
        else:
            validate_host_format(self.host)
        validate_port(self.port)

        if self.user is not None and (not self.user or self.user != self.user.strip()):
            raise ValueError("User name cannot be empty or padded with whitespace")
        if self.subsystem is not None and (
            not self.subsystem or any(c.isspace() for c in self.subsystem)
        ):
            raise ValueError(f"Subsystem must be a single word: {self.subsystem!r}")


@dataclass(frozen=True)
class Credential:
    """User identity with an optional password.

    The password never appears in ``repr()`` so a credential can be logged
    or shown in a traceback without exposing it.
    """

    username: str
    password: str | None = field(default=None, repr=False)
