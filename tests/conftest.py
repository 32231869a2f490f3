"""
Shared pytest fixtures.
"""
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from loginguard.core.config import Settings
from loginguard.main import create_app
from loginguard.services.auth.login_service import LoginService
from loginguard.services.security import (
    AuditLogger,
    InMemoryLockoutStore,
    LockoutPolicy,
    LockoutTracker,
)
from tests.fixtures.lockout import FakeClock, StubCredentialVerifier


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def policy() -> LockoutPolicy:
    return LockoutPolicy(max_attempts=5, cooldown=timedelta(minutes=30))


@pytest.fixture
def tracker(policy: LockoutPolicy, clock: FakeClock) -> LockoutTracker:
    return LockoutTracker(policy=policy, store=InMemoryLockoutStore(), clock=clock)


@pytest.fixture
def verifier() -> StubCredentialVerifier:
    return StubCredentialVerifier()


@pytest.fixture
def audit_logger() -> AuditLogger:
    return AuditLogger(buffer_size=100)


@pytest.fixture
def login_service(
    tracker: LockoutTracker,
    verifier: StubCredentialVerifier,
    audit_logger: AuditLogger,
    clock: FakeClock,
) -> LoginService:
    return LoginService(tracker=tracker, verifier=verifier, audit=audit_logger, clock=clock)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        ENVIRONMENT="development",
        LOCKOUT_SWEEP_INTERVAL_SECONDS=0,
        CREDENTIAL_VERIFIER=None,
    )


@pytest.fixture
def client(
    test_settings: Settings,
    tracker: LockoutTracker,
    verifier: StubCredentialVerifier,
    audit_logger: AuditLogger,
) -> TestClient:
    app = create_app(
        settings=test_settings,
        credential_verifier=verifier,
        tracker=tracker,
        audit=audit_logger,
    )
    return TestClient(app)
