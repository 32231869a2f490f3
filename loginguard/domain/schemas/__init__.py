"""
Request and response schemas.
"""
from .auth import AttemptData, LoginFailureResponse, LoginRequest

__all__ = ["AttemptData", "LoginFailureResponse", "LoginRequest"]
