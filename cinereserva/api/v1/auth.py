"""Login, registration and bearer-token dependencies."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from cinereserva.core.database import get_db, transaction
from cinereserva.core.errors import ConflictError, StoreError, UnauthorizedError
from cinereserva.core.security import (
    TokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from cinereserva.models import ROLE_USER, User
from cinereserva.repositories.roles import get_role_by_name
from cinereserva.repositories.users import (
    add_role_to_user,
    create_user,
    email_exists,
    get_user_by_id,
    get_user_by_username,
    username_exists,
)
from cinereserva.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    TokenClaims,
    UserResponse,
)
from cinereserva.schemas.common import MessageResponse
from cinereserva.services.validation import validate_login_request, validate_register_request

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)

INVALID_CREDENTIALS_MESSAGE = "Credenciales inválidas"
NOT_AUTHORIZED_MESSAGE = "No autorizado"
USERNAME_TAKEN_MESSAGE = "El nombre de usuario ya está en uso"
EMAIL_TAKEN_MESSAGE = "El email ya está en uso"


def _auth_response(user: User) -> AuthResponse:
    token = create_access_token(
        user_id=user.id,
        username=user.username,
        roles=[role.name for role in user.roles],
    )
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate with username and password; returns a JWT and the user.
    Unknown user and wrong password get the same 401 response.
    """
    validate_login_request(body)

    user = get_user_by_username(db, body.username)
    if user is None or not verify_password(body.password, user.password_hash):
        logger.info("Login rejected", extra={"username": body.username})
        raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)
    return _auth_response(user)


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Create an account with ROLE_USER and return a JWT for it.

    The user row and its role grant are committed together or not at all.
    """
    validate_register_request(body)
    username = body.username.strip()
    email = body.email.strip()

    if username_exists(db, username):
        raise ConflictError(USERNAME_TAKEN_MESSAGE)
    if email_exists(db, email):
        raise ConflictError(EMAIL_TAKEN_MESSAGE)

    role = get_role_by_name(db, ROLE_USER)
    if role is None:
        raise StoreError(f"default role {ROLE_USER} has not been seeded")

    new_user = User(
        username=username,
        email=email,
        password_hash=hash_password(body.password),
        first_name=body.first_name,
        last_name=body.last_name,
    )
    with transaction(db):
        create_user(db, new_user)
        add_role_to_user(db, new_user.id, role.id)

    user = get_user_by_id(db, new_user.id)
    if user is None:
        raise StoreError("registered user vanished before it could be read back")
    logger.info("User registered", extra={"user_id": user.id})
    return _auth_response(user)


@router.post("/logout", response_model=MessageResponse)
def logout() -> MessageResponse:
    """Tokens are stateless; the client discards its copy."""
    return MessageResponse(message="Sesión cerrada correctamente")


def get_current_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> TokenClaims:
    """Dependency: require a valid Bearer JWT. Every failure is the same 401."""
    if credentials is None:
        raise UnauthorizedError(NOT_AUTHORIZED_MESSAGE)
    try:
        return decode_access_token(credentials.credentials)
    except TokenError as e:
        logger.info("Bearer token rejected", extra={"reason": type(e).__name__})
        raise UnauthorizedError(NOT_AUTHORIZED_MESSAGE) from e


@router.get("/me", response_model=TokenClaims)
def me(claims: Annotated[TokenClaims, Depends(get_current_claims)]) -> TokenClaims:
    """Claims of the presented bearer token."""
    return claims
