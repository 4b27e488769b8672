"""Field-level checks on request payloads.

Pure functions, no I/O. Each validator stops at the first rule that fails
and raises InputValidationError carrying that rule's message, so a client
always receives exactly one message per invalid request.
"""

import re

from cinereserva.core.config import settings
from cinereserva.core.errors import InputValidationError
from cinereserva.schemas.auth import LoginRequest, RegisterRequest, UserUpdateRequest
from cinereserva.schemas.movie import MovieRequest

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 50
EMAIL_MAX_LEN = 80
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 120
NAME_MAX_LEN = 50
TITLE_MAX_LEN = 200
DESCRIPTION_MAX_LEN = 1000


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _check(condition: bool, message: str) -> None:
    if not condition:
        raise InputValidationError(message)


def _validate_profile(username: str, email: str) -> None:
    _check(len(username.strip()) >= USERNAME_MIN_LEN, "el nombre de usuario debe tener al menos 3 caracteres")
    _check(len(username) <= USERNAME_MAX_LEN, "el nombre de usuario no puede tener más de 50 caracteres")
    _check(bool(EMAIL_PATTERN.match(email)), "el email no tiene un formato válido")
    _check(len(email) <= EMAIL_MAX_LEN, "el email no puede tener más de 80 caracteres")


def _validate_names(first_name: str | None, last_name: str | None) -> None:
    _check(first_name is None or len(first_name) <= NAME_MAX_LEN, "el nombre no puede tener más de 50 caracteres")
    _check(last_name is None or len(last_name) <= NAME_MAX_LEN, "el apellido no puede tener más de 50 caracteres")


def validate_register_request(req: RegisterRequest) -> None:
    _validate_profile(req.username, req.email)
    _check(len(req.password) >= PASSWORD_MIN_LEN, "la contraseña debe tener al menos 6 caracteres")
    _check(len(req.password) <= PASSWORD_MAX_LEN, "la contraseña no puede tener más de 120 caracteres")
    _validate_names(req.first_name, req.last_name)


def validate_user_update(req: UserUpdateRequest) -> None:
    """Same rules as registration, minus the password."""
    _validate_profile(req.username, req.email)
    _validate_names(req.first_name, req.last_name)


def validate_login_request(req: LoginRequest) -> None:
    _check(not _blank(req.username), "el nombre de usuario es obligatorio")
    _check(not _blank(req.password), "la contraseña es obligatoria")


def validate_movie_request(req: MovieRequest) -> None:
    max_duration = settings.MOVIE_MAX_DURATION

    _check(not _blank(req.title), "el título es obligatorio")
    _check(len(req.title) <= TITLE_MAX_LEN, "el título no puede tener más de 200 caracteres")

    _check(not _blank(req.description), "la descripción es obligatoria")
    _check(len(req.description) <= DESCRIPTION_MAX_LEN, "la descripción no puede tener más de 1000 caracteres")

    _check(not _blank(req.poster_image), "la imagen del póster es obligatoria")
    _check(not _blank(req.genre), "el género es obligatorio")

    _check(req.duration > 0, "la duración debe ser mayor a 0 minutos")
    _check(req.duration <= max_duration, f"la duración no puede ser mayor a {max_duration} minutos")

    _check(not _blank(req.rating), "la clasificación es obligatoria")
    _check(not _blank(req.release_date), "la fecha de estreno es obligatoria")
    _check(not _blank(req.director), "el director es obligatorio")
