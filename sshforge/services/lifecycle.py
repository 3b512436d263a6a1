"""Transport lifecycle state tracking.

Each transport owns one ``Lifecycle``. Transitions only move forward:

    CREATED -> OPENING -> OPEN -> CLOSING -> CLOSED
                  \\         \\
                   +---------+--> FAULTED
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sshforge.models import TransportState
from sshforge.services.errors import ConnectFailure, TransportStateError

T = TypeVar("T")

logger = logging.getLogger(__name__)


TERMINAL_STATES = frozenset({TransportState.CLOSED, TransportState.FAULTED})

_ALLOWED: dict[TransportState, frozenset[TransportState]] = {
    TransportState.CREATED: frozenset({TransportState.OPENING, TransportState.CLOSING}),
    TransportState.OPENING: frozenset(
        {TransportState.OPEN, TransportState.CLOSING, TransportState.FAULTED}
    ),
    TransportState.OPEN: frozenset({TransportState.CLOSING, TransportState.FAULTED}),
    TransportState.CLOSING: frozenset({TransportState.CLOSED}),
    TransportState.CLOSED: frozenset(),
    TransportState.FAULTED: frozenset(),
}


class Lifecycle:
    """State machine plus per-stream locks for one transport."""

    def __init__(self, name: str) -> None:
        """Initialize lifecycle.

        Args:
            name: Label used in log messages (host:port, never credentials)
        """
        self.name = name
        self._state = TransportState.CREATED
        self.stdout_lock = asyncio.Lock()
        self.stderr_lock = asyncio.Lock()
        self.stdin_lock = asyncio.Lock()

    @property
    def state(self) -> TransportState:
        return self._state

    @property
    def is_terminal(self) -> bool:
        return self._state in TERMINAL_STATES

    def advance(self, new_state: TransportState) -> None:
        """Move to ``new_state``.

        Raises:
            TransportStateError: If the transition is not allowed
        """
        if new_state not in _ALLOWED[self._state]:
            raise TransportStateError(f"move to {new_state}", self._state)
        logger.debug("%s: %s -> %s", self.name, self._state, new_state)
        self._state = new_state

    def begin_open(self) -> None:
        """Enter OPENING; only a fresh transport can be opened."""
        if self._state is not TransportState.CREATED:
            raise TransportStateError("open", self._state)
        self.advance(TransportState.OPENING)

    def fault(self) -> None:
        """Enter FAULTED from OPENING or OPEN. Other states are left alone."""
        if self._state in (TransportState.OPENING, TransportState.OPEN):
            self.advance(TransportState.FAULTED)

    def require_open(self, operation: str) -> None:
        """Raise unless the transport is OPEN."""
        if self._state is not TransportState.OPEN:
            raise TransportStateError(operation, self._state)

    async def guard(
        self,
        awaitable: Awaitable[T],
        release: Callable[[], None],
        errors: tuple[type[BaseException], ...] = (OSError,),
    ) -> T:
        """Await one I/O step, faulting the transport if it fails.

        Cancellation and any of ``errors`` move the transport to FAULTED and
        call ``release`` before the error propagates. ``errors`` are re-raised
        as ConnectFailure.
        """
        try:
            return await awaitable
        except asyncio.CancelledError:
            logger.warning("%s: operation cancelled, faulting transport", self.name)
            self.fault()
            release()
            raise
        except errors as e:
            logger.warning("%s: session lost: %s", self.name, e)
            self.fault()
            release()
            raise ConnectFailure(self.name, e) from e
