"""Pydantic request/response schemas."""

from cinereserva.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    RoleResponse,
    TokenClaims,
    UserResponse,
    UserUpdateRequest,
)
from cinereserva.schemas.common import ErrorResponse, MessageResponse
from cinereserva.schemas.health import HealthResponse
from cinereserva.schemas.movie import MovieRequest, MovieResponse

__all__ = [
    "AuthResponse",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "MovieRequest",
    "MovieResponse",
    "RegisterRequest",
    "RoleResponse",
    "TokenClaims",
    "UserResponse",
    "UserUpdateRequest",
]
