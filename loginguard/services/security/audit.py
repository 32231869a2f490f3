"""
Audit logging for LoginGuard authentication events.

Security events are written to the structured application log and kept in
a bounded in-memory buffer so that recent activity for an identifier can
be inspected without a log pipeline.
"""
import threading
from collections import deque
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Deque, Dict, List, Optional

from loginguard.core.logging import get_logger

logger = get_logger(__name__)


class SecurityEvent(str, Enum):
    """Security event types for audit logging."""

    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILURE = "login_failure"
    LOGIN_BLOCKED = "login_blocked"
    ACCOUNT_LOCKED = "account_locked"
    ACCOUNT_UNLOCKED = "account_unlocked"


class AuditSeverity(str, Enum):
    """Severity levels for audit events."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditLogEntry:
    """Represents an audit log entry."""

    def __init__(
        self,
        event: SecurityEvent,
        severity: AuditSeverity,
        timestamp: datetime,
        identifier: Optional[str] = None,
        ip_address: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.event = event
        self.severity = severity
        self.timestamp = timestamp
        self.identifier = identifier
        self.ip_address = ip_address
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format."""
        return {
            "event": self.event.value,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
            "identifier": self.identifier,
            "ip_address": self.ip_address,
            "details": self.details,
        }


class AuditLogger:
    """
    Records authentication security events.

    Entries older than the newest ``buffer_size`` are discarded; the log
    stream is the durable record.
    """

    EVENT_SEVERITY_MAP = {
        SecurityEvent.LOGIN_SUCCESS: AuditSeverity.INFO,
        SecurityEvent.LOGIN_FAILURE: AuditSeverity.WARNING,
        SecurityEvent.LOGIN_BLOCKED: AuditSeverity.WARNING,
        SecurityEvent.ACCOUNT_LOCKED: AuditSeverity.ERROR,
        SecurityEvent.ACCOUNT_UNLOCKED: AuditSeverity.WARNING,
    }

    def __init__(self, buffer_size: int = 1000):
        self.buffer_size = buffer_size
        self._entries: Deque[AuditLogEntry] = deque(maxlen=buffer_size)
        self._lock = threading.Lock()

    def log_event(
        self,
        event: SecurityEvent,
        identifier: Optional[str] = None,
        ip_address: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[AuditSeverity] = None,
        timestamp: Optional[datetime] = None,
    ) -> AuditLogEntry:
        """
        Log a security event.

        Args:
            event: Security event type
            identifier: Account identifier the event concerns
            ip_address: Client IP address
            details: Event-specific details
            severity: Override default severity
            timestamp: Event time (defaults to now)

        Returns:
            The recorded entry
        """
        if severity is None:
            severity = self.EVENT_SEVERITY_MAP.get(event, AuditSeverity.INFO)

        entry = AuditLogEntry(
            event=event,
            severity=severity,
            timestamp=timestamp or datetime.now(timezone.utc),
            identifier=identifier,
            ip_address=ip_address,
            details=details,
        )

        if self.buffer_size:
            with self._lock:
                self._entries.append(entry)

        log_method = {
            AuditSeverity.ERROR: logger.error,
            AuditSeverity.WARNING: logger.warning,
        }.get(severity, logger.info)
        log_method(f"Audit: {event.value}", audit_entry=entry.to_dict())

        return entry

    def recent_events(
        self,
        identifier: Optional[str] = None,
        event: Optional[SecurityEvent] = None,
        limit: int = 50,
    ) -> List[AuditLogEntry]:
        """
        Get recent entries, newest first.

        Args:
            identifier: Only entries for this identifier
            event: Only entries of this type
            limit: Maximum number of entries to return
        """
        with self._lock:
            entries = list(self._entries)

        matched = []
        for entry in reversed(entries):
            if identifier is not None and entry.identifier != identifier:
                continue
            if event is not None and entry.event != event:
                continue
            matched.append(entry)
            if len(matched) >= limit:
                break
        return matched

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
