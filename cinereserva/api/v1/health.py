"""Health check endpoints with backing store connectivity checks."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cinereserva.core.config import settings
from cinereserva.core.database import check_db_connected, get_db
from cinereserva.core.mongo import check_mongo_connected
from cinereserva.schemas.health import HealthResponse

user_service_router = APIRouter()
movie_service_router = APIRouter()


@user_service_router.get("", response_model=HealthResponse)
def get_user_service_health(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"
    return HealthResponse(
        service="user-service",
        environment=settings.APP_ENV,
        database=db_status,
    )


@movie_service_router.get("", response_model=HealthResponse)
def get_movie_service_health() -> HealthResponse:
    """Return service health status and MongoDB connectivity."""
    db_status = "connected" if check_mongo_connected() else "disconnected"
    return HealthResponse(
        service="movie-service",
        environment=settings.APP_ENV,
        database=db_status,
    )
