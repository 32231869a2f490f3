"""
Tests for audit logging.
"""
from loginguard.services.security import AuditLogger, AuditSeverity, SecurityEvent


class TestAuditLogger:
    """Test audit event recording."""

    def test_default_severity(self):
        audit = AuditLogger()
        entry = audit.log_event(SecurityEvent.ACCOUNT_LOCKED, identifier="user@x.com")
        assert entry.severity == AuditSeverity.ERROR
        assert entry.to_dict()["event"] == "account_locked"

    def test_recent_events_newest_first_and_filtered(self):
        audit = AuditLogger()
        audit.log_event(SecurityEvent.LOGIN_FAILURE, identifier="a@x.com")
        audit.log_event(SecurityEvent.LOGIN_FAILURE, identifier="b@x.com")
        audit.log_event(SecurityEvent.LOGIN_SUCCESS, identifier="a@x.com")

        events = audit.recent_events(identifier="a@x.com")
        assert [entry.event for entry in events] == [
            SecurityEvent.LOGIN_SUCCESS,
            SecurityEvent.LOGIN_FAILURE,
        ]
        assert len(audit.recent_events(event=SecurityEvent.LOGIN_FAILURE)) == 2
        assert len(audit.recent_events(limit=1)) == 1

    def test_buffer_is_bounded(self):
        audit = AuditLogger(buffer_size=3)
        for i in range(5):
            audit.log_event(SecurityEvent.LOGIN_FAILURE, identifier=f"user{i}@x.com")

        identifiers = [entry.identifier for entry in audit.recent_events()]
        assert identifiers == ["user4@x.com", "user3@x.com", "user2@x.com"]

    def test_zero_buffer_keeps_nothing(self):
        audit = AuditLogger(buffer_size=0)
        audit.log_event(SecurityEvent.LOGIN_SUCCESS, identifier="user@x.com")
        assert audit.recent_events() == []

    def test_clear(self):
        audit = AuditLogger()
        audit.log_event(SecurityEvent.LOGIN_SUCCESS, identifier="user@x.com")
        audit.clear()
        assert audit.recent_events() == []
