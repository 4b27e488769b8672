"""Request/response schemas for auth and user endpoints."""

from datetime import datetime

from pydantic import Field, field_validator

from cinereserva.schemas.base import CamelModel


class LoginRequest(CamelModel):
    """Credentials for login. Emptiness is checked by the validation layer."""

    username: str = ""
    password: str = ""

    @field_validator("username", "password", mode="before")
    @classmethod
    def null_as_empty(cls, v: object) -> object:
        return "" if v is None else v


class RegisterRequest(CamelModel):
    """New account. Field rules live in services.validation (first failure wins)."""

    username: str = ""
    password: str = ""
    email: str = ""
    first_name: str | None = None
    last_name: str | None = None

    @field_validator("username", "password", "email", mode="before")
    @classmethod
    def null_as_empty(cls, v: object) -> object:
        return "" if v is None else v


class UserUpdateRequest(CamelModel):
    """Full replacement of a user's mutable profile fields."""

    username: str = ""
    email: str = ""
    first_name: str | None = None
    last_name: str | None = None

    @field_validator("username", "email", mode="before")
    @classmethod
    def null_as_empty(cls, v: object) -> object:
        return "" if v is None else v


class RoleResponse(CamelModel):
    id: int
    name: str


class UserResponse(CamelModel):
    """User without sensitive data (the password digest never leaves the service)."""

    id: int
    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    roles: list[RoleResponse] = Field(default_factory=list)


class AuthResponse(CamelModel):
    """Bearer token plus the authenticated user."""

    token: str = Field(..., description="JWT bearer token")
    user: UserResponse


class TokenClaims(CamelModel):
    """Decoded bearer token payload. Derived on demand, never stored."""

    user_id: int
    username: str
    roles: list[str] = Field(default_factory=list)
    issued_at: datetime
    expires_at: datetime
    issuer: str
