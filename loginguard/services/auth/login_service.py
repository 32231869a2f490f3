"""
Login orchestration.

Combines the lockout tracker with the credential verifier: a locked-out
identifier is rejected before its credentials are looked at, and every
verification outcome is fed back into the tracker.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from loginguard.core.errors import ErrorKind, ErrorMessages, ErrorResponse
from loginguard.core.logging import get_logger
from loginguard.domain.interfaces.credentials import ICredentialVerifier
from loginguard.services.security.audit import AuditLogger, SecurityEvent
from loginguard.services.security.lockout import Clock, LockoutTracker, utc_now
from loginguard.services.security.store import AttemptRecord

logger = get_logger(__name__)


@dataclass(frozen=True)
class LoginOutcome:
    """
    Result of a login attempt.

    Exactly one of ``result`` (on success) or ``error`` is meaningful.
    Failures carry the attempt record they were decided on.
    """

    error: Optional[ErrorKind] = None
    result: Any = None
    record: Optional[AttemptRecord] = None

    @classmethod
    def success(cls, result: Any) -> "LoginOutcome":
        return cls(result=result)

    @classmethod
    def failure(cls, kind: ErrorKind, record: AttemptRecord) -> "LoginOutcome":
        return cls(error=kind, record=record)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status_code(self) -> int:
        return 200 if self.ok else ErrorMessages.status_code(self.error)

    @property
    def message(self) -> Optional[str]:
        return None if self.ok else ErrorMessages.get(self.error)

    def to_response_body(self) -> Any:
        """Body for the HTTP response: the verifier payload or the error envelope."""
        if self.ok:
            return self.result
        data: Optional[Dict[str, Any]] = self.record.to_payload() if self.record else None
        return ErrorResponse.for_kind(self.error, data=data).to_dict()


class LoginService:
    """Authenticates login attempts under the lockout policy."""

    def __init__(
        self,
        tracker: LockoutTracker,
        verifier: ICredentialVerifier,
        audit: Optional[AuditLogger] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the login service.

        Args:
            tracker: Lockout tracker owning the attempt state
            verifier: Credential verification backend
            audit: Audit logger for security events
            clock: Time source (defaults to the tracker's clock)
        """
        self.tracker = tracker
        self.verifier = verifier
        self.audit = audit or AuditLogger()
        self.clock = clock or tracker.clock or utc_now

    async def login(
        self,
        identifier: str,
        secret: str,
        client_ip: Optional[str] = None,
    ) -> LoginOutcome:
        """
        Authenticate an identifier and secret.

        Args:
            identifier: Account identifier
            secret: Credential material, passed through to the verifier
            client_ip: Client IP address, for auditing

        Returns:
            LoginOutcome: success with the verifier payload, or a
            TOO_MANY_ATTEMPTS / INVALID_CREDENTIALS failure

        Raises:
            Exception: Whatever the verifier raises, unchanged
        """
        now = self.clock()

        decision = await self.tracker.check(identifier, now)
        if decision.locked:
            logger.warning(
                "login_blocked_locked_out",
                identifier=identifier,
                attempt_count=decision.record.attempt_count,
                ip=client_ip,
            )
            self.audit.log_event(
                SecurityEvent.LOGIN_BLOCKED,
                identifier=identifier,
                ip_address=client_ip,
                details=decision.record.to_payload(),
                timestamp=now,
            )
            return LoginOutcome.failure(ErrorKind.TOO_MANY_ATTEMPTS, decision.record)

        result = await self.verifier.verify_credentials(identifier, secret)

        if not result:
            record = await self.tracker.record_failure(identifier, now)
            logger.warning(
                "login_attempt_invalid_credentials",
                identifier=identifier,
                attempt_count=record.attempt_count,
                ip=client_ip,
            )
            self.audit.log_event(
                SecurityEvent.LOGIN_FAILURE,
                identifier=identifier,
                ip_address=client_ip,
                details=record.to_payload(),
                timestamp=now,
            )
            if record.attempt_count == self.tracker.policy.max_attempts:
                self.audit.log_event(
                    SecurityEvent.ACCOUNT_LOCKED,
                    identifier=identifier,
                    ip_address=client_ip,
                    details={
                        **record.to_payload(),
                        "cooldown_seconds": int(self.tracker.policy.cooldown.total_seconds()),
                    },
                    timestamp=now,
                )
            return LoginOutcome.failure(ErrorKind.INVALID_CREDENTIALS, record)

        await self.tracker.record_success(identifier)
        logger.info("login_success", identifier=identifier, ip=client_ip)
        self.audit.log_event(
            SecurityEvent.LOGIN_SUCCESS,
            identifier=identifier,
            ip_address=client_ip,
            timestamp=now,
        )
        return LoginOutcome.success(result)

    async def unlock(self, identifier: str, admin_user: Optional[str] = None) -> bool:
        """
        Manually clear an identifier's lockout.

        Args:
            identifier: Account identifier
            admin_user: Operator performing the unlock

        Returns:
            True if a non-zero failure counter was cleared
        """
        unlocked = await self.tracker.unlock(identifier)
        if unlocked:
            self.audit.log_event(
                SecurityEvent.ACCOUNT_UNLOCKED,
                identifier=identifier,
                details={"admin_user": admin_user} if admin_user else None,
            )
        return unlocked
