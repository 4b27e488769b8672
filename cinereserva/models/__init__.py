"""SQLAlchemy ORM models and the movie document model."""

from cinereserva.models.base import Base
from cinereserva.models.movie import Movie
from cinereserva.models.user import ROLE_ADMIN, ROLE_USER, Role, User, user_roles

__all__ = ["Base", "Movie", "ROLE_ADMIN", "ROLE_USER", "Role", "User", "user_roles"]
