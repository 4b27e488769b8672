"""User profile endpoints: list, read, update, delete."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from cinereserva.api.v1.auth import EMAIL_TAKEN_MESSAGE, USERNAME_TAKEN_MESSAGE
from cinereserva.core.database import get_db, transaction
from cinereserva.core.errors import ConflictError, NotFoundError
from cinereserva.repositories.users import (
    USER_NOT_FOUND_MESSAGE,
    delete_user,
    email_exists,
    get_user_by_id,
    list_users,
    update_user,
    username_exists,
)
from cinereserva.schemas.auth import UserResponse, UserUpdateRequest
from cinereserva.services.validation import validate_user_update

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=list[UserResponse])
def get_users(db: Annotated[Session, Depends(get_db)]) -> list[UserResponse]:
    """All users, newest first."""
    return [UserResponse.model_validate(u) for u in list_users(db)]


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Annotated[Session, Depends(get_db)]) -> UserResponse:
    user = get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND_MESSAGE)
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
def put_user(
    user_id: int,
    body: UserUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """
    Replace username, email and names.

    Taking a username or email that another user holds is a 400 and leaves
    the record untouched. Last write wins between concurrent updates.
    """
    validate_user_update(body)
    existing = get_user_by_id(db, user_id)
    if existing is None:
        raise NotFoundError(USER_NOT_FOUND_MESSAGE)

    username = body.username.strip()
    email = body.email.strip()
    if username != existing.username and username_exists(db, username):
        raise ConflictError(USERNAME_TAKEN_MESSAGE)
    if email != existing.email and email_exists(db, email):
        raise ConflictError(EMAIL_TAKEN_MESSAGE)

    with transaction(db):
        update_user(
            db,
            user_id,
            username=username,
            email=email,
            first_name=body.first_name,
            last_name=body.last_name,
        )

    updated = get_user_by_id(db, user_id)
    if updated is None:
        raise NotFoundError(USER_NOT_FOUND_MESSAGE)
    return UserResponse.model_validate(updated)


@router.delete("/{user_id}", status_code=204)
def remove_user(user_id: int, db: Annotated[Session, Depends(get_db)]) -> Response:
    """Delete the user and its role grants. A second delete of the same id is a 404."""
    with transaction(db):
        delete_user(db, user_id)
    logger.info("User deleted", extra={"user_id": user_id})
    return Response(status_code=204)
