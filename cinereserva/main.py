"""ASGI entrypoints for both services. No business logic; only wiring, startup seeding and middleware.

  uvicorn cinereserva.main:user_app --port 8081
  uvicorn cinereserva.main:movie_app --port 8082
"""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cinereserva.api.errors import register_error_handlers
from cinereserva.api.v1 import movie_router, user_router
from cinereserva.api.v1.health import movie_service_router, user_service_router
from cinereserva.api.v1.movies import get_movie_repository
from cinereserva.core.config import settings
from cinereserva.core.database import SessionLocal, engine
from cinereserva.core.errors import StoreError
from cinereserva.models import Base
from cinereserva.services.seed import seed_default_roles, seed_sample_movies

logger = logging.getLogger(__name__)


@asynccontextmanager
async def user_lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Startup: tables and default roles must exist before the first registration.
    if settings.DB_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_default_roles(db)
    finally:
        db.close()
    yield


@asynccontextmanager
async def movie_lifespan(app: FastAPI) -> AsyncIterator[None]:
    if settings.SEED_SAMPLE_MOVIES:
        try:
            seed_sample_movies(get_movie_repository())
        except StoreError:
            logger.exception("Sample movie seeding failed; starting with the current catalog")
    yield


def _build_app(
    title: str,
    api_router: APIRouter,
    health_router: APIRouter,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[None]],
) -> FastAPI:
    app = FastAPI(
        title=title,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)
    app.include_router(health_router, prefix="/health", tags=["health"])
    return app


user_app = _build_app("CineReserva User Service", user_router, user_service_router, user_lifespan)
movie_app = _build_app("CineReserva Movie Service", movie_router, movie_service_router, movie_lifespan)
