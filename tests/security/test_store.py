"""
Tests for attempt record storage.
"""
from datetime import timedelta

import pytest

from loginguard.services.security import AttemptRecord, InMemoryLockoutStore
from tests.fixtures.lockout import LockoutTestData


def _record(count: int, minutes: int = 0) -> AttemptRecord:
    return AttemptRecord(
        attempt_count=count,
        last_failure_at=LockoutTestData.START + timedelta(minutes=minutes),
    )


class TestAttemptRecord:
    """Test the record value type."""

    def test_rejects_negative_count(self):
        with pytest.raises(ValueError):
            _record(-1)

    def test_payload_format(self):
        assert _record(3).to_payload() == {
            "timestamp": "2024-01-01T12:00:00+00:00",
            "attemptCount": 3,
        }


class TestInMemoryLockoutStore:
    """Test the in-memory store."""

    @pytest.mark.asyncio
    async def test_update_inserts_and_returns_previous(self):
        store = InMemoryLockoutStore()

        previous, current = await store.update("user@x.com", lambda record: _record(1))

        assert previous is None
        assert current == _record(1)
        assert await store.get("user@x.com") == _record(1)
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_transition_returning_none_leaves_store_untouched(self):
        store = InMemoryLockoutStore()

        previous, current = await store.update("user@x.com", lambda record: None)

        assert previous is None and current is None
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_transition_receives_current_record(self):
        store = InMemoryLockoutStore()
        await store.update("user@x.com", lambda record: _record(2))
        seen = []

        def transition(record):
            seen.append(record)
            return record

        await store.update("user@x.com", transition)
        assert seen == [_record(2)]

    @pytest.mark.asyncio
    async def test_evicts_least_recently_updated(self):
        store = InMemoryLockoutStore(max_entries=2)
        await store.update("first@x.com", lambda record: _record(1))
        await store.update("second@x.com", lambda record: _record(1))
        # Touch the first so the second becomes the oldest
        await store.update("first@x.com", lambda record: _record(2))

        await store.update("third@x.com", lambda record: _record(1))

        assert len(store) == 2
        assert await store.get("second@x.com") is None
        assert await store.get("first@x.com") == _record(2)
        assert store.is_full is True

    @pytest.mark.asyncio
    async def test_updating_existing_key_never_evicts(self):
        store = InMemoryLockoutStore(max_entries=1)
        await store.update("user@x.com", lambda record: _record(1))
        await store.update("user@x.com", lambda record: _record(2))
        assert await store.get("user@x.com") == _record(2)

    @pytest.mark.asyncio
    async def test_insert_drops_evictable_record_before_lru(self):
        store = InMemoryLockoutStore(max_entries=2)
        await store.update("oldest@x.com", lambda record: _record(3))
        await store.update("reset@x.com", lambda record: _record(0))

        await store.update(
            "third@x.com",
            lambda record: _record(1),
            evictable=lambda record: record.attempt_count == 0,
        )

        assert await store.get("reset@x.com") is None
        assert await store.get("oldest@x.com") == _record(3)
        assert len(store) == 2

    @pytest.mark.asyncio
    async def test_evictable_not_consulted_below_capacity_or_for_existing_keys(self):
        store = InMemoryLockoutStore(max_entries=2)
        consulted = []

        def evictable(record):
            consulted.append(record)
            return True

        await store.update("first@x.com", lambda record: _record(1), evictable=evictable)
        await store.update("second@x.com", lambda record: _record(1), evictable=evictable)
        await store.update("second@x.com", lambda record: _record(2), evictable=evictable)

        assert consulted == []
        assert len(store) == 2

    @pytest.mark.asyncio
    async def test_eviction_scan_is_bounded(self):
        store = InMemoryLockoutStore(max_entries=10, eviction_scan_limit=3)
        for index in range(10):
            await store.update(f"user{index}@x.com", lambda record: _record(1))
        consulted = []

        def evictable(record):
            consulted.append(record)
            return False

        await store.update("new@x.com", lambda record: _record(1), evictable=evictable)

        assert len(consulted) == 3
        assert len(store) == 10
        assert await store.get("user0@x.com") is None

    @pytest.mark.asyncio
    async def test_purge_and_delete(self):
        store = InMemoryLockoutStore()
        await store.update("zero@x.com", lambda record: _record(0))
        await store.update("one@x.com", lambda record: _record(1))

        assert await store.purge(lambda record: record.attempt_count == 0) == 1
        assert await store.delete("one@x.com") is True
        assert await store.delete("one@x.com") is False
        assert len(store) == 0

    def test_unbounded_store_is_never_full(self):
        store = InMemoryLockoutStore()
        assert store.capacity is None
        assert store.is_full is False

    def test_rejects_invalid_capacity(self):
        with pytest.raises(ValueError):
            InMemoryLockoutStore(max_entries=0)

    def test_rejects_negative_scan_limit(self):
        with pytest.raises(ValueError):
            InMemoryLockoutStore(max_entries=2, eviction_scan_limit=-1)
