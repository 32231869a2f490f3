"""
Application configuration management using Pydantic Settings.
"""
from datetime import timedelta
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "LoginGuard"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = Field(default="development", pattern="^(development|staging|production)$")

    # API
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "LoginGuard API"

    # Lockout policy
    LOCKOUT_MAX_ATTEMPTS: int = Field(default=5, ge=1)
    LOCKOUT_COOLDOWN_MINUTES: float = Field(default=30, gt=0)
    LOCKOUT_MAX_TRACKED_IDENTIFIERS: int = Field(default=100_000, ge=1)
    LOCKOUT_SWEEP_INTERVAL_SECONDS: int = Field(default=300, ge=0)  # 0 disables the sweeper

    # Audit
    AUDIT_BUFFER_SIZE: int = Field(default=1000, ge=0)

    # Credential verifier, as "package.module:attribute"
    CREDENTIAL_VERIFIER: Optional[str] = None

    # Sentry
    SENTRY_DSN: Optional[str] = None
    SENTRY_ENVIRONMENT: Optional[str] = None
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    @field_validator("CREDENTIAL_VERIFIER", mode="before")
    @classmethod
    def blank_verifier_is_unset(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def lockout_cooldown(self) -> timedelta:
        """Cooldown window as a timedelta."""
        return timedelta(minutes=self.LOCKOUT_COOLDOWN_MINUTES)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT == "development"

    def get_lockout_config(self) -> Dict[str, Any]:
        """Get lockout policy configuration."""
        return {
            "max_attempts": self.LOCKOUT_MAX_ATTEMPTS,
            "cooldown_minutes": self.LOCKOUT_COOLDOWN_MINUTES,
            "max_tracked_identifiers": self.LOCKOUT_MAX_TRACKED_IDENTIFIERS,
            "sweep_interval_seconds": self.LOCKOUT_SWEEP_INTERVAL_SECONDS,
        }


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings
    """
    return Settings()


# Create a settings instance for easy import
settings = get_settings()
