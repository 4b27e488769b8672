"""Movie catalog record as held in memory; the repository maps it to and from documents."""

from datetime import datetime

from pydantic import BaseModel, Field


class Movie(BaseModel):
    """
    A catalog entry.

    ``id`` is the hex form of the document's ObjectId and is None until the
    movie has been stored. Duration is in minutes.
    """

    id: str | None = None
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
