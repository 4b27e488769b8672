"""Startup data: default roles and the sample movie catalog."""

import logging

from sqlalchemy.orm import Session

from cinereserva.models import Movie
from cinereserva.models.user import DEFAULT_ROLES
from cinereserva.repositories.movies import MovieRepository
from cinereserva.repositories.roles import create_role, get_role_by_name

logger = logging.getLogger(__name__)

SAMPLE_MOVIES = (
    Movie(
        title="Avengers: Endgame",
        description=(
            "Los Vengadores se reúnen una vez más para deshacer las acciones de Thanos "
            "y restaurar el equilibrio del universo."
        ),
        poster_image="https://example.com/avengers-endgame.jpg",
        genre="Acción",
        duration=181,
        rating="PG-13",
        release_date="2019-04-26",
        director="Anthony Russo, Joe Russo",
        cast=["Robert Downey Jr.", "Chris Evans", "Mark Ruffalo", "Chris Hemsworth"],
    ),
    Movie(
        title="The Batman",
        description="En su segundo año luchando contra el crimen, Batman desentraña la corrupción en Gotham City.",
        poster_image="https://example.com/the-batman.jpg",
        genre="Acción",
        duration=176,
        rating="PG-13",
        release_date="2022-03-04",
        director="Matt Reeves",
        cast=["Robert Pattinson", "Zoë Kravitz", "Paul Dano", "Jeffrey Wright"],
    ),
    Movie(
        title="Spider-Man: No Way Home",
        description="Peter Parker busca la ayuda del Doctor Strange cuando su identidad secreta es revelada.",
        poster_image="https://example.com/spiderman-no-way-home.jpg",
        genre="Acción",
        duration=148,
        rating="PG-13",
        release_date="2021-12-17",
        director="Jon Watts",
        cast=["Tom Holland", "Zendaya", "Benedict Cumberbatch", "Jacob Batalon"],
    ),
)


def seed_default_roles(db: Session) -> list[str]:
    """
    Create ROLE_USER and ROLE_ADMIN if missing and commit.

    Idempotent: safe to run on every startup. Returns the names created.
    """
    created = []
    for name in DEFAULT_ROLES:
        if get_role_by_name(db, name) is None:
            create_role(db, name)
            created.append(name)
    db.commit()
    if created:
        logger.info("Seeded default roles", extra={"roles": created})
    return created


def seed_sample_movies(repo: MovieRepository) -> int:
    """Insert the sample catalog only when the collection is empty. Returns documents inserted."""
    if repo.count() > 0:
        return 0
    inserted = repo.insert_many(SAMPLE_MOVIES)
    logger.info("Seeded sample movies", extra={"movie_count": inserted})
    return inserted
