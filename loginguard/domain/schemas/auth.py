"""
Authentication schemas.
"""
from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class LoginRequest(BaseModel):
    """Login credentials."""
    model_config = ConfigDict(populate_by_name=True)

    identifier: str = Field(
        ...,
        min_length=1,
        max_length=320,
        validation_alias=AliasChoices("identifier", "email"),
    )
    secret: str = Field(
        ...,
        max_length=1024,
        validation_alias=AliasChoices("secret", "password"),
    )

    @field_validator("identifier")
    @classmethod
    def identifier_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("identifier must not be blank")
        return v


class AttemptData(BaseModel):
    """Diagnostic data attached to a failed login."""
    model_config = ConfigDict(populate_by_name=True)

    timestamp: datetime
    attempt_count: int = Field(..., ge=0, alias="attemptCount")


class LoginFailureResponse(BaseModel):
    """Body of a rejected login."""
    message: str
    data: AttemptData
