"""Session transport backed by an in-process asyncssh client.

Two channel modes, chosen by whether the options carry a subsystem:

- Shell mode: a PTY-backed channel runs the subsystem as the remote command.
  The PTY merges stderr into stdout, so the stderr reader only reports EOF
  once the channel closes.
- Exec mode: the default remote command (PowerShell in SSH server mode) runs
  on a plain channel with distinct stdout, stderr and stdin.
"""

import asyncio
import logging

import asyncssh

from sshforge.config import resolve_known_hosts
from sshforge.config.settings import DEFAULT_REMOTE_COMMAND
from sshforge.models import SessionOptions
from sshforge.protocols import EOF
from sshforge.services.errors import (
    ConfigurationError,
    ConnectFailure,
    ResourceMissing,
    TransportStateError,
)
from sshforge.services.lifecycle import Lifecycle, TransportState

logger = logging.getLogger(__name__)

TERM_TYPE = "xterm"
# columns, rows, width px, height px
TERM_SIZE = (80, 24, 800, 600)

SSH_ERRORS: tuple[type[BaseException], ...] = (asyncssh.Error, OSError)


async def _send(process: asyncssh.SSHClientProcess, text: str) -> None:
    # SSHWriter.write raises BrokenPipeError once the channel is closed
    process.stdin.write(f"{text}\n")
    await process.stdin.drain()


class LibrarySessionTransport:
    """Line-oriented session over an asyncssh client channel."""

    def __init__(
        self,
        options: SessionOptions,
        *,
        known_hosts: str | None = None,
        default_command: str = DEFAULT_REMOTE_COMMAND,
        connect_timeout: float = 30.0,
        close_timeout: float = 5.0,
    ) -> None:
        """Initialize transport.

        Args:
            options: Session options; must carry a user name
            known_hosts: known_hosts path, 'none', or None for the default
            default_command: Remote command for exec mode
            connect_timeout: Seconds allowed for connect and authentication
            close_timeout: Seconds to wait for the connection to close

        Raises:
            ConfigurationError: If options carry no user name
        """
        if not options.user:
            raise ConfigurationError(
                f"A user name is required for password authentication to {options.address}"
            )

        self.options = options
        self.exit_status: int | None = None
        self._known_hosts = known_hosts
        self._default_command = default_command
        self._connect_timeout = connect_timeout
        self._close_timeout = close_timeout
        self._lifecycle = Lifecycle(options.address)
        self._conn: asyncssh.SSHClientConnection | None = None
        self._process: asyncssh.SSHClientProcess | None = None

    @property
    def state(self) -> TransportState:
        return self._lifecycle.state

    @property
    def mode(self) -> str:
        """'shell' when a subsystem is set, otherwise 'exec'."""
        return "shell" if self.options.subsystem else "exec"

    async def open(self) -> None:
        """Connect, authenticate and start the remote channel.

        Raises:
            ResourceMissing: If a configured known_hosts file does not exist
            ConnectFailure: If connecting, authenticating or opening the
                channel fails
            TransportStateError: If the transport was already opened
        """
        self._lifecycle.begin_open()
        name = self._lifecycle.name
        try:
            try:
                known_hosts = resolve_known_hosts(
                    self._known_hosts, self.options.skip_host_key_check
                )
            except FileNotFoundError as e:
                raise ResourceMissing("known_hosts file", self._known_hosts) from e

            logger.info(
                "Opening SSH connection to %s (user=%s, mode=%s)",
                name,
                self.options.user,
                self.mode,
            )
            try:
                self._conn = await asyncssh.connect(
                    self.options.host,
                    port=self.options.port,
                    username=self.options.user,
                    password=self.options.password,
                    known_hosts=known_hosts,
                    connect_timeout=self._connect_timeout,
                )
                self._process = await self._start_channel(self._conn)
            except SSH_ERRORS as e:
                raise ConnectFailure(name, e) from e
        except BaseException as e:
            logger.error("Failed to open session to %s: %s", name, e)
            self._lifecycle.fault()
            self._release()
            raise

        # close() may have run while connecting
        if self._lifecycle.state is not TransportState.OPENING:
            self._release()
            raise TransportStateError("open", self._lifecycle.state)

        self._lifecycle.advance(TransportState.OPEN)
        logger.info("Session to %s open (mode=%s)", name, self.mode)

    async def _start_channel(
        self, conn: asyncssh.SSHClientConnection
    ) -> asyncssh.SSHClientProcess:
        """Start the shell-mode or exec-mode channel."""
        if self.options.subsystem:
            return await conn.create_process(
                self.options.subsystem,
                term_type=TERM_TYPE,
                term_size=TERM_SIZE,
                encoding="utf-8",
                errors="replace",
            )
        return await conn.create_process(
            self._default_command,
            encoding="utf-8",
            errors="replace",
        )

    async def read_output(self) -> str | None:
        """Read the next stdout line; at EOF, reap the remote exit status."""
        self._lifecycle.require_open("read output")
        process = self._require_process()
        async with self._lifecycle.stdout_lock:
            line = await self._lifecycle.guard(
                process.stdout.readline(), self._release, SSH_ERRORS
            )
            if not line:
                await self._lifecycle.guard(self._reap(process), self._release, SSH_ERRORS)
                return EOF
        return line.rstrip("\r\n")

    async def read_error(self) -> str | None:
        """Read the next stderr line."""
        self._lifecycle.require_open("read error")
        process = self._require_process()
        async with self._lifecycle.stderr_lock:
            line = await self._lifecycle.guard(
                process.stderr.readline(), self._release, SSH_ERRORS
            )
        return line.rstrip("\r\n") if line else EOF

    async def write_input(self, text: str) -> None:
        """Write one line to the channel's stdin."""
        self._lifecycle.require_open("write input")
        process = self._require_process()
        async with self._lifecycle.stdin_lock:
            await self._lifecycle.guard(_send(process, text), self._release, SSH_ERRORS)

    async def close(self) -> None:
        """Close the channel and disconnect."""
        if self._lifecycle.is_terminal or self._lifecycle.state is TransportState.CLOSING:
            return

        self._lifecycle.advance(TransportState.CLOSING)
        try:
            conn = self._conn
            self._release()
            if conn is not None:
                try:
                    await asyncio.wait_for(conn.wait_closed(), timeout=self._close_timeout)
                except TimeoutError:
                    logger.warning(
                        "Connection to %s did not close within %.1fs, abandoning it",
                        self._lifecycle.name,
                        self._close_timeout,
                    )
        finally:
            self._lifecycle.advance(TransportState.CLOSED)
            logger.info("Session to %s closed", self._lifecycle.name)

    async def dispose(self) -> None:
        """Close, then make sure nothing is left behind."""
        await self.close()
        self._release()

    async def __aenter__(self) -> "LibrarySessionTransport":
        await self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.dispose()

    async def _reap(self, process: asyncssh.SSHClientProcess) -> None:
        """Record the exit status once stdout has ended."""
        try:
            await asyncio.wait_for(process.wait_closed(), timeout=self._close_timeout)
        except TimeoutError:
            logger.debug("Channel to %s still open after stdout EOF", self._lifecycle.name)
        self.exit_status = process.exit_status
        logger.info(
            "Remote command on %s finished (exit_status=%s)",
            self._lifecycle.name,
            self.exit_status,
        )

    def _release(self) -> None:
        """Close the channel and connection without waiting."""
        if self._process is not None:
            self._process.close()
        if self._conn is not None:
            self._conn.close()

    def _require_process(self) -> asyncssh.SSHClientProcess:
        if self._process is None:
            raise TransportStateError("use channel", self._lifecycle.state)
        return self._process
