"""One-time secret handoff store.

An authenticating helper process cannot be given a password on its command
line (visible in process listings) or in a long-lived environment variable.
Instead the transport stores the secret here and publishes only a random
session id. The helper then fetches the secret through a short-lived local
channel, and the first fetch removes it.

Locking Strategy:
- A single ``threading.Lock`` guards the entries dict. The helper channel
  may be served from a thread other than the event loop, so an asyncio lock
  is not enough.
- ``take`` pops under the lock, so exactly one caller receives a secret.
"""

import logging
import secrets
import threading

logger = logging.getLogger(__name__)

SESSION_ID_BYTES = 32


class SecretNotFound(KeyError):
    """No secret is stored under the given session id."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"No secret for session {_short(session_id)}")


def _short(session_id: str) -> str:
    """Shortened session id for log messages."""
    return f"{session_id[:6]}..."


class SecretHandoffStore:
    """Process-wide keyed store of single-read secrets."""

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}
        self._lock = threading.Lock()

    def put(self, secret: str) -> str:
        """Store a secret and return the session id that retrieves it."""
        with self._lock:
            session_id = secrets.token_urlsafe(SESSION_ID_BYTES)
            while session_id in self._entries:
                session_id = secrets.token_urlsafe(SESSION_ID_BYTES)
            self._entries[session_id] = secret
            count = len(self._entries)

        logger.debug("Stored handoff secret %s (entries=%d)", _short(session_id), count)
        return session_id

    def take(self, session_id: str) -> str:
        """Remove and return the secret for a session.

        Raises:
            SecretNotFound: If the secret was never stored, already taken
                or purged
        """
        with self._lock:
            secret = self._entries.pop(session_id, None)

        if secret is None:
            raise SecretNotFound(session_id)

        logger.debug("Handoff secret %s taken", _short(session_id))
        return secret

    def purge(self, session_id: str) -> None:
        """Discard the secret for a session. Absent ids are ignored."""
        with self._lock:
            removed = self._entries.pop(session_id, None) is not None

        if removed:
            logger.debug("Purged handoff secret %s", _short(session_id))

    def clear(self) -> None:
        """Discard every stored secret."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __repr__(self) -> str:
        return f"SecretHandoffStore(entries={len(self)})"
