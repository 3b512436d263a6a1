"""Protocol interfaces for session transports.

Callers depend on ``SessionTransport`` rather than a concrete class, so an
external factory can hand back either variant:

    from sshforge.protocols import SessionTransport

    async def pump(transport: SessionTransport) -> None:
        async with transport:
            while (line := await transport.read_output()) is not EOF:
                print(line)

    # Either implementation works
    await pump(ProcessTransport(options, askpass_path=helper))
    await pump(LibrarySessionTransport(options))

Variants share no base class; each owns its own state.
"""

from typing import Final, Protocol, runtime_checkable

from sshforge.models import TransportState

#: End-of-stream sentinel returned by read operations.
EOF: Final = None


@runtime_checkable
class SessionTransport(Protocol):
    """Protocol for a remote duplex text session.

    Example implementation:
        class MyTransport:
            async def open(self) -> None: ...
            async def read_output(self) -> str | None: ...
            async def read_error(self) -> str | None: ...
            async def write_input(self, text: str) -> None: ...
            async def close(self) -> None: ...
            async def dispose(self) -> None: ...
    """

    @property
    def state(self) -> TransportState:
        """Current lifecycle state."""
        ...

    async def open(self) -> None:
        """Establish the connection or process.

        Raises:
            ConfigurationError: If options cannot work
            ResourceMissing: If a helper resource is absent
            ConnectFailure: If spawn, connect or authentication fails
        """
        ...

    async def read_output(self) -> str | None:
        """Read the next standard output line.

        Returns:
            Line without its trailing newline, or EOF when the remote side
            closed its output

        Note:
            The first line returned purges any pending handoff secret.
        """
        ...

    async def read_error(self) -> str | None:
        """Read the next standard error line, or EOF."""
        ...

    async def write_input(self, text: str) -> None:
        """Write one line to standard input.

        Raises:
            TransportStateError: If the transport is not open
        """
        ...

    async def close(self) -> None:
        """Terminate the remote side and release streams.

        Note:
            Safe to call repeatedly and on never-opened transports.
        """
        ...

    async def dispose(self) -> None:
        """Release every handle, whatever state the transport is in."""
        ...


__all__ = ["EOF", "SessionTransport"]
