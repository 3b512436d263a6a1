"""Tests for the secret handoff store."""

import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from sshforge.services.handoff import SecretHandoffStore, SecretNotFound
from sshforge.services.state import get_handoff_store, reset_state, set_handoff_store


@pytest.fixture
def store() -> SecretHandoffStore:
    """Fresh handoff store."""
    return SecretHandoffStore()


class TestSecretHandoffStore:
    """Test store operations."""

    def test_put_then_take(self, store):
        """A stored secret can be taken back."""
        session_id = store.put("hunter2")
        assert session_id in store
        assert store.take(session_id) == "hunter2"
        assert session_id not in store

    def test_take_is_single_use(self, store):
        """The second take of the same id fails."""
        session_id = store.put("hunter2")
        assert store.take(session_id) == "hunter2"

        with pytest.raises(SecretNotFound):
            store.take(session_id)

    def test_take_unknown(self, store):
        """Unknown ids raise SecretNotFound, a KeyError."""
        with pytest.raises(KeyError):
            store.take("missing")

    def test_purge_removes_entry(self, store):
        """Purged secrets cannot be taken."""
        session_id = store.put("hunter2")
        store.purge(session_id)

        assert session_id not in store
        with pytest.raises(SecretNotFound):
            store.take(session_id)

    def test_purge_absent_is_noop(self, store):
        """Purging an unknown id does nothing."""
        store.purge("missing")
        session_id = store.put("x")
        store.purge(session_id)
        store.purge(session_id)
        assert len(store) == 0

    def test_ids_are_unique(self, store):
        """Every put gets its own id, even for the same secret."""
        ids = {store.put("same") for _ in range(100)}
        assert len(ids) == 100
        assert len(store) == 100

    def test_empty_secret_round_trip(self, store):
        """An empty password is still a secret."""
        session_id = store.put("")
        assert store.take(session_id) == ""

    def test_clear(self, store):
        """clear drops everything."""
        store.put("a")
        store.put("b")
        store.clear()
        assert len(store) == 0

    def test_secret_not_in_repr_or_errors(self, store):
        """Neither repr nor errors expose secrets or full ids."""
        session_id = store.put("hunter2")
        assert "hunter2" not in repr(store)

        store.purge(session_id)
        with pytest.raises(SecretNotFound) as exc_info:
            store.take(session_id)
        assert session_id not in str(exc_info.value)

    def test_secret_never_logged(self, store, caplog):
        """Store operations never log the secret."""
        with caplog.at_level(logging.DEBUG, logger="sshforge"):
            session_id = store.put("hunter2")
            store.take(session_id)
            store.purge(session_id)

        assert "hunter2" not in caplog.text
        assert session_id not in caplog.text

    def test_concurrent_take_single_winner(self, store):
        """Exactly one of many concurrent takers gets the secret."""
        session_id = store.put("hunter2")

        def attempt() -> str | None:
            try:
                return store.take(session_id)
            except SecretNotFound:
                return None

        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(pool.map(lambda _: attempt(), range(64)))

        assert results.count("hunter2") == 1
        assert results.count(None) == 63

    def test_concurrent_sessions_independent(self, store):
        """Entries from parallel sessions do not interfere."""
        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = list(pool.map(lambda i: (i, store.put(f"secret-{i}")), range(50)))

        for i, session_id in ids:
            assert store.take(session_id) == f"secret-{i}"


class TestHandoffState:
    """Test the process-wide store accessor."""

    @pytest.fixture(autouse=True)
    def fresh_state(self):
        reset_state()
        yield
        reset_state()

    def test_singleton(self):
        """get_handoff_store returns the same instance each time."""
        assert get_handoff_store() is get_handoff_store()

    def test_reset_clears_secrets(self):
        """reset_state drops stored secrets and the instance."""
        store = get_handoff_store()
        session_id = store.put("hunter2")

        reset_state()

        assert session_id not in store
        assert get_handoff_store() is not store

    def test_set_store(self):
        """set_handoff_store injects a custom instance."""
        custom = SecretHandoffStore()
        set_handoff_store(custom)
        assert get_handoff_store() is custom
