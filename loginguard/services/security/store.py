"""
Attempt record storage for the lockout tracker.

The store owns the identifier -> AttemptRecord mapping. Every change goes
through ``update``, which applies a transition function to the current
record while holding the store lock, so read-modify-write sequences for an
identifier cannot interleave. Backends other than the in-memory one (a
shared cache, for example) implement the same contract.
"""
import threading
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from itertools import islice
from typing import Callable, Dict, Optional, Tuple

from loginguard.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AttemptRecord:
    """Failed-attempt state for one identifier."""

    attempt_count: int
    last_failure_at: datetime

    def __post_init__(self) -> None:
        if self.attempt_count < 0:
            raise ValueError("attempt_count must be non-negative")

    def to_payload(self) -> Dict[str, object]:
        """Diagnostic payload included in login failure responses."""
        return {
            "timestamp": self.last_failure_at.isoformat(),
            "attemptCount": self.attempt_count,
        }


# Receives the current record (None when absent) and returns the record to
# store. Returning None or the same object leaves the store untouched.
Transition = Callable[[Optional[AttemptRecord]], Optional[AttemptRecord]]
Predicate = Callable[[AttemptRecord], bool]


class LockoutStore(ABC):
    """Storage contract for attempt records."""

    @abstractmethod
    async def get(self, identifier: str) -> Optional[AttemptRecord]:
        """Return the record for an identifier, if any."""

    @abstractmethod
    async def update(
        self,
        identifier: str,
        transition: Transition,
        evictable: Optional[Predicate] = None,
    ) -> Tuple[Optional[AttemptRecord], Optional[AttemptRecord]]:
        """
        Atomically apply a transition to an identifier's record.

        Args:
            identifier: Account identifier
            transition: Function computing the new record from the current one
            evictable: Records a bounded store may drop first when inserting
                a new identifier

        Returns:
            Tuple of (previous record, current record)
        """

    @abstractmethod
    async def purge(self, predicate: Predicate) -> int:
        """Remove every record matching the predicate. Returns the count removed."""

    @abstractmethod
    async def delete(self, identifier: str) -> bool:
        """Remove an identifier's record. Returns True if it existed."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of tracked identifiers."""

    @property
    def capacity(self) -> Optional[int]:
        """Maximum number of tracked identifiers, or None when unbounded."""
        return None

    @property
    def is_full(self) -> bool:
        return self.capacity is not None and len(self) >= self.capacity


class InMemoryLockoutStore(LockoutStore):
    """
    Process-local store bounded by ``max_entries``.

    Records are kept in least-recently-updated order. When a new identifier
    arrives and the store is full, the oldest ``eviction_scan_limit`` records
    are checked for one the caller marks as evictable; failing that, the
    least recently updated record is dropped. Updates to identifiers already
    in the store never evict or scan.
    """

    def __init__(self, max_entries: Optional[int] = None, eviction_scan_limit: int = 64):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        if eviction_scan_limit < 0:
            raise ValueError("eviction_scan_limit must be non-negative")
        self._records: "OrderedDict[str, AttemptRecord]" = OrderedDict()
        self._lock = threading.Lock()
        self._max_entries = max_entries
        self._eviction_scan_limit = eviction_scan_limit

    @property
    def capacity(self) -> Optional[int]:
        return self._max_entries

    def __len__(self) -> int:
        return len(self._records)

    async def get(self, identifier: str) -> Optional[AttemptRecord]:
        with self._lock:
            return self._records.get(identifier)

    async def update(
        self,
        identifier: str,
        transition: Transition,
        evictable: Optional[Predicate] = None,
    ) -> Tuple[Optional[AttemptRecord], Optional[AttemptRecord]]:
        with self._lock:
            previous = self._records.get(identifier)
            current = transition(previous)

            if current is None or current is previous:
                return previous, previous

            if previous is None:
                self._evict_for_insert(evictable)
            self._records[identifier] = current
            self._records.move_to_end(identifier)
            return previous, current

    async def purge(self, predicate: Predicate) -> int:
        with self._lock:
            stale = [key for key, record in self._records.items() if predicate(record)]
            for key in stale:
                del self._records[key]
            return len(stale)

    async def delete(self, identifier: str) -> bool:
        with self._lock:
            return self._records.pop(identifier, None) is not None

    def _evict_for_insert(self, evictable: Optional[Predicate]) -> None:
        # Caller holds the lock.
        if self._max_entries is None or len(self._records) < self._max_entries:
            return

        if evictable is not None:
            for key in list(islice(self._records, self._eviction_scan_limit)):
                if evictable(self._records[key]):
                    del self._records[key]
                    if len(self._records) < self._max_entries:
                        return

        while len(self._records) >= self._max_entries:
            _, record = self._records.popitem(last=False)
            logger.warning(
                "Evicted lockout record to stay within capacity",
                attempt_count=record.attempt_count,
                capacity=self._max_entries,
            )
