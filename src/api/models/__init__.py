"""API Pydantic models."""

from .responses import (
    ErrorCodes,
    ErrorResponse,
    HealthResponse,
    LoginRequest,
    MessageResponse,
    UserCreateRequest,
    UserProfileResponse,
    UserResponse,
    UserUpdateRequest,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "MessageResponse",
    "LoginRequest",
    "UserProfileResponse",
    "UserResponse",
    "UserCreateRequest",
    "UserUpdateRequest",
]
