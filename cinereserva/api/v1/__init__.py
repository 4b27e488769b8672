"""API v1 routes, one aggregate router per service."""

from fastapi import APIRouter

from cinereserva.api.v1 import auth, movies, users

user_router = APIRouter()
user_router.include_router(auth.router, prefix="/auth", tags=["auth"])
user_router.include_router(users.router, prefix="/users", tags=["users"])

movie_router = APIRouter()
movie_router.include_router(movies.router, prefix="/movies", tags=["movies"])
