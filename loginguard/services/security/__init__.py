"""
Security services for LoginGuard.

This package provides:
- Attempt record storage
- Account lockout tracking
- Audit logging
"""

from .audit import AuditLogEntry, AuditLogger, AuditSeverity, SecurityEvent
from .lockout import (
    LockoutDecision,
    LockoutPolicy,
    LockoutTracker,
    evaluate_lockout,
    utc_now,
)
from .store import AttemptRecord, InMemoryLockoutStore, LockoutStore

__all__ = [
    # Audit logging
    "AuditLogEntry",
    "AuditLogger",
    "AuditSeverity",
    "SecurityEvent",

    # Account lockout
    "LockoutDecision",
    "LockoutPolicy",
    "LockoutTracker",
    "evaluate_lockout",
    "utc_now",

    # Storage
    "AttemptRecord",
    "InMemoryLockoutStore",
    "LockoutStore",
]
