"""Request/response schemas for the movie catalog."""

from datetime import datetime

from pydantic import Field, field_validator

from cinereserva.schemas.base import CamelModel


class MovieRequest(CamelModel):
    """Create/update payload. Missing or null fields arrive empty and fail validation with a precise message."""

    title: str = ""
    description: str = ""
    poster_image: str = ""
    genre: str = ""
    duration: int = 0
    rating: str = ""
    release_date: str = ""
    director: str = ""
    cast: list[str] | None = None

    @field_validator(
        "title", "description", "poster_image", "genre", "rating", "release_date", "director", mode="before"
    )
    @classmethod
    def null_text_as_empty(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("duration", mode="before")
    @classmethod
    def null_duration_as_zero(cls, v: object) -> object:
        return 0 if v is None else v


class MovieResponse(CamelModel):
    id: str
    title: str
    description: str
    poster_image: str
    genre: str
    duration: int
    rating: str
    release_date: str
    director: str
    cast: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
