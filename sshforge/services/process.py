"""Session transport backed by an external ssh client process.

The client (``ssh``, or a wrapper such as ``hvc.exe`` that takes ``ssh`` as
its first argument) is spawned with all three standard streams piped.

Password authentication goes through an SSH_ASKPASS helper. The password
itself never reaches the child's argv or environment: it is parked in the
handoff store and only its session id is published in SSHFORGE_SID. The
entry is purged as soon as the first output line arrives, or on close.
"""

import asyncio
import logging
import os
from contextlib import suppress
from pathlib import Path

from sshforge.config import host_key_arguments
from sshforge.config.settings import DEFAULT_SUBSYSTEM
from sshforge.models import SessionOptions
from sshforge.protocols import EOF
from sshforge.services.errors import ConnectFailure, ResourceMissing, TransportStateError
from sshforge.services.handoff import SecretHandoffStore
from sshforge.services.lifecycle import Lifecycle, TransportState
from sshforge.services.state import get_handoff_store

logger = logging.getLogger(__name__)

ASKPASS_ENV = "SSH_ASKPASS"
ASKPASS_REQUIRE_ENV = "SSH_ASKPASS_REQUIRE"
PID_ENV = "SSHFORGE_PID"
SESSION_ID_ENV = "SSHFORGE_SID"


def build_ssh_arguments(
    options: SessionOptions,
    executable: str | None = None,
    default_subsystem: str = DEFAULT_SUBSYSTEM,
) -> list[str]:
    """Build the argument vector for the ssh client.

    Args:
        options: Session options
        executable: Wrapper binary that takes ``ssh`` as its first argument,
            or None to run ``ssh`` directly
        default_subsystem: Subsystem requested when options carry none

    Returns:
        Full argv, program name first
    """
    argv = [executable, "ssh"] if executable else ["ssh"]
    argv.extend(host_key_arguments(options.skip_host_key_check))

    if options.user is not None:
        argv.extend(["-l", options.user])

    # "--" ends option parsing so the subsystem is never read as an option
    argv.extend([
        "-p", str(options.port),
        "-s", "--", options.host,
        options.subsystem or default_subsystem,
    ])
    return argv


def build_environment(askpass_path: str, session_id: str | None = None) -> dict[str, str]:
    """Build the variables published to the ssh client and its askpass helper."""
    env = {
        ASKPASS_ENV: askpass_path,
        ASKPASS_REQUIRE_ENV: "force",
        PID_ENV: str(os.getpid()),
    }
    if session_id is not None:
        env[SESSION_ID_ENV] = session_id
    return env


def _decode(line: bytes) -> str:
    return line.decode("utf-8", errors="replace").rstrip("\r\n")


async def _send(process: asyncio.subprocess.Process, text: str) -> None:
    # write() raises too once the pipe is gone
    process.stdin.write(f"{text}\n".encode())
    await process.stdin.drain()


class ProcessTransport:
    """Line-oriented session over a spawned ssh client."""

    def __init__(
        self,
        options: SessionOptions,
        *,
        askpass_path: str | None,
        executable: str | None = None,
        default_subsystem: str = DEFAULT_SUBSYSTEM,
        close_timeout: float = 5.0,
        store: SecretHandoffStore | None = None,
    ) -> None:
        """Initialize transport.

        Args:
            options: Session options
            askpass_path: SSH_ASKPASS helper; must exist when opening
            executable: Optional wrapper binary around ssh
            default_subsystem: Subsystem requested when options carry none
            close_timeout: Seconds to wait for the client to exit on close
            store: Handoff store (defaults to the process-wide store)
        """
        self.options = options
        self.exit_status: int | None = None
        self._askpass_path = askpass_path
        self._argv = build_ssh_arguments(options, executable, default_subsystem)
        self._close_timeout = close_timeout
        self._store = store
        self._lifecycle = Lifecycle(options.address)
        self._process: asyncio.subprocess.Process | None = None
        self._session_id: str | None = None

    @property
    def state(self) -> TransportState:
        return self._lifecycle.state

    @property
    def arguments(self) -> list[str]:
        """Argument vector used to spawn the client."""
        return list(self._argv)

    @property
    def session_id(self) -> str | None:
        """Handoff session id, while a secret is pending."""
        return self._session_id

    @property
    def _handoff(self) -> SecretHandoffStore:
        if self._store is None:
            self._store = get_handoff_store()
        return self._store

    async def open(self) -> None:
        """Spawn the ssh client.

        Raises:
            ResourceMissing: If the askpass helper does not exist
            ConnectFailure: If the client cannot be spawned
            TransportStateError: If the transport was already opened
        """
        self._lifecycle.begin_open()
        name = self._lifecycle.name
        try:
            askpass = self._askpass_path
            if not askpass or not Path(askpass).is_file():
                raise ResourceMissing("askpass helper", askpass)

            if self.options.password is not None:
                self._session_id = self._handoff.put(self.options.password)

            env = {**os.environ, **build_environment(askpass, self._session_id)}
            logger.info(
                "Starting ssh client for %s (user=%s, host_key_check=%s)",
                name,
                self.options.user,
                not self.options.skip_host_key_check,
            )
            try:
                self._process = await asyncio.create_subprocess_exec(
                    *self._argv,
                    stdin=asyncio.subprocess.PIPE,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    env=env,
                )
            except OSError as e:
                raise ConnectFailure(name, e) from e
        except BaseException as e:
            logger.error("Failed to open session to %s: %s", name, e)
            self._lifecycle.fault()
            self._release()
            raise

        # close() may have run while the client was spawning
        if self._lifecycle.state is not TransportState.OPENING:
            self._release()
            raise TransportStateError("open", self._lifecycle.state)

        self._lifecycle.advance(TransportState.OPEN)
        logger.info("Session to %s open (pid=%d)", name, self._process.pid)

    async def read_output(self) -> str | None:
        """Read the next stdout line; at EOF, reap the client's exit status."""
        self._lifecycle.require_open("read output")
        process = self._require_process()
        async with self._lifecycle.stdout_lock:
            line = await self._lifecycle.guard(process.stdout.readline(), self._release)
            if not line:
                self.exit_status = await self._lifecycle.guard(process.wait(), self._release)
                logger.info(
                    "ssh client for %s finished (exit_status=%s)",
                    self._lifecycle.name,
                    self.exit_status,
                )
                return EOF

        # Authentication is over once the remote side talks to us
        self._purge_secret()
        return _decode(line)

    async def read_error(self) -> str | None:
        """Read the next stderr line."""
        self._lifecycle.require_open("read error")
        process = self._require_process()
        async with self._lifecycle.stderr_lock:
            line = await self._lifecycle.guard(process.stderr.readline(), self._release)
        return _decode(line) if line else EOF

    async def write_input(self, text: str) -> None:
        """Write one line to the client's stdin."""
        self._lifecycle.require_open("write input")
        process = self._require_process()
        async with self._lifecycle.stdin_lock:
            await self._lifecycle.guard(_send(process, text), self._release)

    async def close(self) -> None:
        """Terminate the client and release its pipes."""
        if self._lifecycle.is_terminal or self._lifecycle.state is TransportState.CLOSING:
            return

        self._lifecycle.advance(TransportState.CLOSING)
        try:
            await self._shutdown()
        finally:
            self._release()
            self._lifecycle.advance(TransportState.CLOSED)
            logger.info("Session to %s closed", self._lifecycle.name)

    async def dispose(self) -> None:
        """Close, then make sure nothing is left behind."""
        await self.close()
        self._release()

    async def __aenter__(self) -> "ProcessTransport":
        await self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.dispose()

    async def _shutdown(self) -> None:
        """Ask the client to exit, escalating to kill after the timeout."""
        self._purge_secret()
        process = self._process
        if process is None:
            return

        if process.stdin is not None:
            process.stdin.close()

        if process.returncode is None:
            with suppress(ProcessLookupError):
                process.terminate()
            try:
                await asyncio.wait_for(process.wait(), timeout=self._close_timeout)
            except TimeoutError:
                logger.warning(
                    "ssh client for %s did not exit within %.1fs, killing",
                    self._lifecycle.name,
                    self._close_timeout,
                )
                with suppress(ProcessLookupError):
                    process.kill()

        self.exit_status = process.returncode

    def _release(self) -> None:
        """Drop the handoff secret and kill the client if still running."""
        self._purge_secret()
        process = self._process
        if process is None:
            return
        if process.returncode is None:
            with suppress(ProcessLookupError):
                process.kill()
        if process.stdin is not None:
            process.stdin.close()

    def _purge_secret(self) -> None:
        if self._session_id is not None:
            self._handoff.purge(self._session_id)
            self._session_id = None

    def _require_process(self) -> asyncio.subprocess.Process:
        if self._process is None:
            raise TransportStateError("use process", self._lifecycle.state)
        return self._process
