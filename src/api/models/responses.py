"""Pydantic request/response models for API endpoints."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    template_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class MessageResponse(BaseModel):
    message: str


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class UserProfileResponse(BaseModel):
    """Profile of the authenticated user."""

    id: int
    first_name: str
    last_name: str
    email: str
    is_admin: bool


class UserResponse(BaseModel):
    """User record without the password hash."""

    id: int
    first_name: str
    last_name: str
    username: str
    email: str
    is_admin: bool
    created_at: str
    updated_at: str


class UserCreateRequest(BaseModel):
    first_name: str = ""
    last_name: str = ""
    username: str = ""
    email: str
    password: str = ""
    is_admin: bool = False


class UserUpdateRequest(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NO_MATCHING_DATA = "NO_MATCHING_DATA"
    TEMPLATE_MISSING = "TEMPLATE_MISSING"
    INTERNAL_ERROR = "INTERNAL_ERROR"
