"""
Account lockout tracking for LoginGuard.

Tracks consecutive failed login attempts per account identifier and blocks
further credential checks once the threshold is reached, until the cooldown
window since the last failure has elapsed or a login succeeds.

Per identifier the tracker moves between two states:

- Open: fewer than ``max_attempts`` consecutive failures
- Locked: at least ``max_attempts`` failures and the last one is inside the
  cooldown window

A locked identifier returns to Open when the cooldown elapses (the counter
is reset on the next check) or when a login succeeds.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from loginguard.core.config import Settings
from loginguard.core.logging import get_logger
from loginguard.services.security.store import (
    AttemptRecord,
    InMemoryLockoutStore,
    LockoutStore,
)

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class LockoutPolicy:
    """Lockout thresholds."""

    max_attempts: int = 5
    cooldown: timedelta = field(default_factory=lambda: timedelta(minutes=30))

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.cooldown <= timedelta(0):
            raise ValueError("cooldown must be positive")

    @classmethod
    def from_settings(cls, settings: Settings) -> "LockoutPolicy":
        return cls(
            max_attempts=settings.LOCKOUT_MAX_ATTEMPTS,
            cooldown=settings.lockout_cooldown,
        )

    def cooldown_elapsed(self, record: AttemptRecord, now: datetime) -> bool:
        return now - record.last_failure_at >= self.cooldown

    def reached_threshold(self, record: AttemptRecord) -> bool:
        return record.attempt_count >= self.max_attempts


@dataclass(frozen=True)
class LockoutDecision:
    """
    Outcome of evaluating an identifier's record at a point in time.

    ``transition`` is the record that must replace the current one for the
    decision to hold, or None when no change is needed.
    """

    locked: bool
    record: Optional[AttemptRecord] = None
    transition: Optional[AttemptRecord] = None


def evaluate_lockout(
    record: Optional[AttemptRecord],
    now: datetime,
    policy: LockoutPolicy,
) -> LockoutDecision:
    """
    Decide whether an identifier is locked. Pure; never mutates state.

    Args:
        record: Current record, or None if the identifier is untracked
        now: Evaluation time
        policy: Lockout thresholds

    Returns:
        LockoutDecision, with a reset transition when an expired lockout
        has to be cleared
    """
    if record is None or not policy.reached_threshold(record):
        return LockoutDecision(locked=False, record=record)

    if not policy.cooldown_elapsed(record, now):
        return LockoutDecision(locked=True, record=record)

    reset = AttemptRecord(attempt_count=0, last_failure_at=record.last_failure_at)
    return LockoutDecision(locked=False, record=reset, transition=reset)


def _require_identifier(identifier: str) -> str:
    if not isinstance(identifier, str) or not identifier.strip():
        raise ValueError("identifier must be a non-empty string")
    return identifier


class LockoutTracker:
    """
    Guard consulted before and updated after each credential check.

    State lives in the injected store, so several trackers never share
    records unless they are given the same store.
    """

    def __init__(
        self,
        policy: Optional[LockoutPolicy] = None,
        store: Optional[LockoutStore] = None,
        clock: Clock = utc_now,
    ):
        """
        Initialize the lockout tracker.

        Args:
            policy: Lockout thresholds (defaults to 5 attempts / 30 minutes)
            store: Record storage (defaults to an unbounded in-memory store)
            clock: Source of the current time when callers pass none
        """
        self.policy = policy or LockoutPolicy()
        self.store = store if store is not None else InMemoryLockoutStore()
        self.clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        clock: Clock = utc_now,
    ) -> "LockoutTracker":
        return cls(
            policy=LockoutPolicy.from_settings(settings),
            store=InMemoryLockoutStore(max_entries=settings.LOCKOUT_MAX_TRACKED_IDENTIFIERS),
            clock=clock,
        )

    @property
    def tracked_count(self) -> int:
        return len(self.store)

    async def check(
        self,
        identifier: str,
        now: Optional[datetime] = None,
    ) -> LockoutDecision:
        """
        Evaluate the lockout state and apply any reset it calls for.

        The read and the reset happen in one store update, so a concurrent
        failure cannot slip in between them.
        """
        _require_identifier(identifier)
        if now is None:
            now = self.clock()
        decision = LockoutDecision(locked=False)

        def transition(record: Optional[AttemptRecord]) -> Optional[AttemptRecord]:
            nonlocal decision
            decision = evaluate_lockout(record, now, self.policy)
            return decision.transition

        await self.store.update(identifier, transition)

        if decision.transition is not None:
            logger.info(
                "Lockout cooldown elapsed, attempt counter reset",
                identifier=identifier,
                last_failure_at=decision.transition.last_failure_at.isoformat(),
            )
        return decision

    async def is_locked(
        self,
        identifier: str,
        now: Optional[datetime] = None,
    ) -> bool:
        """
        Check whether an identifier is currently locked out.

        Resets the counter as a side effect when a lockout has expired.
        """
        decision = await self.check(identifier, now)
        return decision.locked

    async def record_failure(
        self,
        identifier: str,
        now: Optional[datetime] = None,
    ) -> AttemptRecord:
        """
        Record a failed login attempt.

        Args:
            identifier: Account identifier
            now: Time of the failure

        Returns:
            The updated record
        """
        _require_identifier(identifier)
        if now is None:
            now = self.clock()

        def transition(record: Optional[AttemptRecord]) -> AttemptRecord:
            count = record.attempt_count + 1 if record else 1
            return AttemptRecord(attempt_count=count, last_failure_at=now)

        _, current = await self.store.update(
            identifier,
            transition,
            evictable=lambda record: self.is_inert(record, now),
        )

        if current.attempt_count == self.policy.max_attempts:
            logger.warning(
                "Account locked after repeated failed logins",
                identifier=identifier,
                attempt_count=current.attempt_count,
                cooldown_seconds=int(self.policy.cooldown.total_seconds()),
            )
        else:
            logger.debug(
                "Failed login recorded",
                identifier=identifier,
                attempt_count=current.attempt_count,
            )
        return current

    async def record_success(self, identifier: str) -> Optional[AttemptRecord]:
        """
        Reset the failure counter after a successful login.

        The record is kept so that the last failure time stays available.
        """
        _require_identifier(identifier)

        def transition(record: Optional[AttemptRecord]) -> Optional[AttemptRecord]:
            if record is None or record.attempt_count == 0:
                return record
            return AttemptRecord(attempt_count=0, last_failure_at=record.last_failure_at)

        _, current = await self.store.update(identifier, transition)
        return current

    async def get_record(self, identifier: str) -> Optional[AttemptRecord]:
        """Get the current record for an identifier without changing it."""
        return await self.store.get(_require_identifier(identifier))

    async def unlock(self, identifier: str) -> bool:
        """
        Manually clear the failure counter for an identifier.

        Returns:
            True if a non-zero failure counter was cleared
        """
        _require_identifier(identifier)
        previous, _ = await self.store.update(
            identifier,
            lambda record: (
                AttemptRecord(attempt_count=0, last_failure_at=record.last_failure_at)
                if record is not None and record.attempt_count
                else record
            ),
        )
        cleared = previous is not None and previous.attempt_count > 0
        if cleared:
            logger.info("Lockout manually cleared", identifier=identifier)
        return cleared

    def is_inert(self, record: AttemptRecord, now: datetime) -> bool:
        """
        True when dropping the record cannot change any future decision.

        A partial count below the threshold is kept even when old, since the
        counter only resets on success or after an expired lockout.
        """
        if record.attempt_count == 0:
            return True
        return self.policy.reached_threshold(record) and self.policy.cooldown_elapsed(record, now)

    async def purge_expired(self, now: Optional[datetime] = None) -> int:
        """
        Drop records that can no longer cause a lockout.

        Returns:
            Number of records removed
        """
        if now is None:
            now = self.clock()
        removed = await self.store.purge(lambda record: self.is_inert(record, now))
        if removed:
            logger.info("Purged inert lockout records", removed=removed, remaining=len(self.store))
        return removed
