"""Transport error taxonomy."""


class TransportError(Exception):
    """Base class for session transport failures."""


class ConfigurationError(TransportError):
    """Transport options cannot work, detected before any connection attempt."""


class ResourceMissing(TransportError):
    """A helper resource required at open time does not exist."""

    def __init__(self, description: str, path: str | None):
        """Initialize resource error.

        Args:
            description: What the resource is used for
            path: Where it was expected, or None if never configured
        """
        self.path = path
        where = f"at '{path}'" if path else "(not configured)"
        super().__init__(f"Cannot find {description} {where}")


class ConnectFailure(TransportError):
    """Spawning, connecting or authenticating failed."""

    def __init__(self, target: str, original_error: BaseException):
        """Initialize connect failure.

        Args:
            target: host:port the transport was opening
            original_error: Error reported by the underlying layer
        """
        self.target = target
        self.original_error = original_error
        super().__init__(f"Cannot connect to {target}: {original_error}")


class TransportStateError(TransportError):
    """Operation not allowed in the transport's current state."""

    def __init__(self, operation: str, state: object):
        self.operation = operation
        self.state = state
        super().__init__(f"Cannot {operation}: transport is {state}")
