"""Pydantic request/response schemas."""

from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.health import HealthResponse
from app.schemas.user import (
    ErrorResponse,
    UserCreate,
    UserCreatedResponse,
    UserDeletedResponse,
    UserRead,
    UsersListResponse,
    UserUpdate,
    UserUpdatedResponse,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "TokenResponse",
    "UserCreate",
    "UserCreatedResponse",
    "UserDeletedResponse",
    "UserRead",
    "UserUpdate",
    "UserUpdatedResponse",
    "UsersListResponse",
]
