"""Movie catalog endpoints: CRUD, search and genre listing."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response

from cinereserva.core.config import settings
from cinereserva.core.errors import NotFoundError
from cinereserva.core.mongo import get_movie_collection
from cinereserva.models import Movie
from cinereserva.repositories.movies import MOVIE_NOT_FOUND_MESSAGE, MovieRepository
from cinereserva.schemas.movie import MovieRequest, MovieResponse
from cinereserva.services.validation import validate_movie_request

logger = logging.getLogger(__name__)
router = APIRouter()


def get_movie_repository() -> MovieRepository:
    """Dependency: repository over the configured movies collection."""
    return MovieRepository(
        get_movie_collection(),
        timeout=settings.MONGO_TIMEOUT_SEC,
        list_timeout=settings.MONGO_LIST_TIMEOUT_SEC,
    )


MovieRepo = Annotated[MovieRepository, Depends(get_movie_repository)]


def _movie_from_request(body: MovieRequest) -> Movie:
    return Movie(
        title=body.title,
        description=body.description,
        poster_image=body.poster_image,
        genre=body.genre,
        duration=body.duration,
        rating=body.rating,
        release_date=body.release_date,
        director=body.director,
        cast=body.cast or [],
    )


def _responses(movies: list[Movie]) -> list[MovieResponse]:
    return [MovieResponse.model_validate(m) for m in movies]


@router.get("", response_model=list[MovieResponse])
def get_movies(repo: MovieRepo) -> list[MovieResponse]:
    """Whole catalog, newest first."""
    return _responses(repo.list_all())


@router.get("/search", response_model=list[MovieResponse])
def search_movies(
    repo: MovieRepo,
    title: str | None = None,
    genre: str | None = None,
) -> list[MovieResponse]:
    """Case-insensitive partial match on title and/or genre."""
    return _responses(repo.search(title=title, genre=genre))


@router.get("/genres", response_model=list[str])
def get_genres(repo: MovieRepo) -> list[str]:
    return repo.distinct_genres()


@router.get("/{movie_id}", response_model=MovieResponse)
def get_movie(movie_id: str, repo: MovieRepo) -> MovieResponse:
    movie = repo.get_by_id(movie_id)
    if movie is None:
        raise NotFoundError(MOVIE_NOT_FOUND_MESSAGE)
    return MovieResponse.model_validate(movie)


@router.post("", response_model=MovieResponse, status_code=201)
def post_movie(body: MovieRequest, repo: MovieRepo) -> MovieResponse:
    validate_movie_request(body)
    movie = repo.create(_movie_from_request(body))
    logger.info("Movie created", extra={"movie_id": movie.id})
    return MovieResponse.model_validate(movie)


@router.put("/{movie_id}", response_model=MovieResponse)
def put_movie(movie_id: str, body: MovieRequest, repo: MovieRepo) -> MovieResponse:
    """Full replacement of the movie's fields; a missing id is a 404."""
    validate_movie_request(body)
    repo.update(movie_id, _movie_from_request(body))
    updated = repo.get_by_id(movie_id)
    if updated is None:
        raise NotFoundError(MOVIE_NOT_FOUND_MESSAGE)
    return MovieResponse.model_validate(updated)


@router.delete("/{movie_id}", status_code=204)
def delete_movie(movie_id: str, repo: MovieRepo) -> Response:
    repo.delete(movie_id)
    logger.info("Movie deleted", extra={"movie_id": movie_id})
    return Response(status_code=204)
