"""Transport lifecycle state."""

from enum import Enum


class TransportState(str, Enum):
    """Transport lifecycle state."""

    CREATED = "created"
    OPENING = "opening"
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"
    FAULTED = "faulted"

    def __str__(self) -> str:
        return self.value
