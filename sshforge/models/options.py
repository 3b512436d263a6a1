"""Session construction options."""

from dataclasses import dataclass

from sshforge.models.descriptor import DEFAULT_PORT, Credential


@dataclass(frozen=True)
class SessionOptions:
    """Everything a transport needs to reach a remote host."""

    host: str
    port: int = DEFAULT_PORT
    credential: Credential | None = None
    skip_host_key_check: bool = False
    subsystem: str | None = None

    @property
    def user(self) -> str | None:
        """User name from the credential, if any."""
        return self.credential.username if self.credential else None

    @property
    def address(self) -> str:
        """host:port label, with IPv6 hosts bracketed."""
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{host}:{self.port}"

    @property
    def password(self) -> str | None:
        """Password from the credential, if any."""
        return self.credential.password if self.credential else None

    @classmethod
    def from_target(
        cls,
        target: str,
        *,
        port: int | None = None,
        credential: Credential | None = None,
        skip_host_key_check: bool = False,
        subsystem: str | None = None,
    ) -> "SessionOptions":
        """Build options from a ``[user@]host[:port][ subsystem]`` string.

        Explicit keyword values win over what the target string carries. A
        user parsed from the target becomes a password-less credential when
        no credential is given.

        Raises:
            ParseError: If the target string is malformed.
        """
        from sshforge.utils.parser import parse_target

        descriptor = parse_target(target)
        if credential is None and descriptor.user is not None:
            credential = Credential(descriptor.user)

        return cls(
            host=descriptor.host,
            port=port if port is not None else descriptor.port,
            credential=credential,
            skip_host_key_check=skip_host_key_check,
            subsystem=subsystem if subsystem is not None else descriptor.subsystem,
        )
