"""Movie catalog persistence over a MongoDB collection."""

import re
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING
from pymongo.collection import Collection

from cinereserva.core.errors import NotFoundError
from cinereserva.core.mongo import deadline
from cinereserva.models import Movie

MOVIE_NOT_FOUND_MESSAGE = "Película no encontrada"

# Document keys for the mutable fields, in wire (camelCase) form.
_FIELD_TO_KEY = {
    "title": "title",
    "description": "description",
    "poster_image": "posterImage",
    "genre": "genre",
    "duration": "duration",
    "rating": "rating",
    "release_date": "releaseDate",
    "director": "director",
    "cast": "cast",
}


def _object_id(movie_id: str) -> ObjectId | None:
    try:
        return ObjectId(movie_id)
    except (InvalidId, TypeError):
        return None


def _mutable_fields(movie: Movie) -> dict[str, Any]:
    return {key: getattr(movie, field) for field, key in _FIELD_TO_KEY.items()}


def _to_document(movie: Movie) -> dict[str, Any]:
    doc = _mutable_fields(movie)
    doc["createdAt"] = movie.created_at
    doc["updatedAt"] = movie.updated_at
    return doc


def _from_document(doc: dict[str, Any]) -> Movie:
    data = {field: doc.get(key) for field, key in _FIELD_TO_KEY.items()}
    data["cast"] = data["cast"] or []
    return Movie(
        id=str(doc["_id"]),
        created_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
        **data,
    )


class MovieRepository:
    """
    CRUD, search and genre listing for movies.

    Single-document calls run under *timeout* seconds; list, search and
    aggregation calls under *list_timeout*. Driver failures surface as
    StoreError / StoreTimeoutError.
    """

    def __init__(self, collection: Collection, timeout: float = 5.0, list_timeout: float = 10.0) -> None:
        self.collection = collection
        self.timeout = timeout
        self.list_timeout = list_timeout

    def create(self, movie: Movie, now: datetime | None = None) -> Movie:
        """Store *movie* under a new ObjectId and return the stored copy."""
        now = now or datetime.now(UTC)
        stored = movie.model_copy(update={"created_at": now, "updated_at": now})
        doc = _to_document(stored)
        doc["_id"] = ObjectId()
        with deadline(self.timeout, "create movie"):
            self.collection.insert_one(doc)
        return stored.model_copy(update={"id": str(doc["_id"])})

    def get_by_id(self, movie_id: str) -> Movie | None:
        """Movie with *movie_id*, or None; ids that are not ObjectIds are simply absent."""
        oid = _object_id(movie_id)
        if oid is None:
            return None
        with deadline(self.timeout, "get movie by id"):
            doc = self.collection.find_one({"_id": oid})
        return _from_document(doc) if doc is not None else None

    def list_all(self) -> list[Movie]:
        return self._find({}, "list movies")

    def search(self, title: str | None = None, genre: str | None = None) -> list[Movie]:
        """Case-insensitive partial match on title and/or genre; blank criteria are ignored."""
        criteria: dict[str, Any] = {}
        if title and title.strip():
            criteria["title"] = {"$regex": re.escape(title.strip()), "$options": "i"}
        if genre and genre.strip():
            criteria["genre"] = {"$regex": re.escape(genre.strip()), "$options": "i"}
        return self._find(criteria, "search movies")

    def _find(self, criteria: dict[str, Any], action: str) -> list[Movie]:
        with deadline(self.list_timeout, action):
            cursor = self.collection.find(criteria).sort("createdAt", DESCENDING)
            return [_from_document(doc) for doc in cursor]

    def update(self, movie_id: str, movie: Movie, now: datetime | None = None) -> None:
        """Overwrite every mutable field of *movie_id*. NotFoundError when nothing matched."""
        oid = _object_id(movie_id)
        if oid is None:
            raise NotFoundError(MOVIE_NOT_FOUND_MESSAGE)
        changes = _mutable_fields(movie)
        changes["updatedAt"] = now or datetime.now(UTC)
        with deadline(self.timeout, "update movie"):
            result = self.collection.update_one({"_id": oid}, {"$set": changes})
        if result.matched_count == 0:
            raise NotFoundError(MOVIE_NOT_FOUND_MESSAGE)

    def delete(self, movie_id: str) -> None:
        oid = _object_id(movie_id)
        if oid is None:
            raise NotFoundError(MOVIE_NOT_FOUND_MESSAGE)
        with deadline(self.timeout, "delete movie"):
            result = self.collection.delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise NotFoundError(MOVIE_NOT_FOUND_MESSAGE)

    def distinct_genres(self) -> list[str]:
        """Every genre once, alphabetically."""
        pipeline = [
            {"$group": {"_id": "$genre"}},
            {"$sort": {"_id": 1}},
        ]
        with deadline(self.list_timeout, "list genres"):
            return [row["_id"] for row in self.collection.aggregate(pipeline) if row["_id"]]

    def count(self) -> int:
        with deadline(self.list_timeout, "count movies"):
            return self.collection.count_documents({})

    def insert_many(self, movies: Iterable[Movie], now: datetime | None = None) -> int:
        """Bulk insert used by seeding; returns how many documents were written."""
        now = now or datetime.now(UTC)
        docs = []
        for movie in movies:
            doc = _to_document(movie.model_copy(update={"created_at": now, "updated_at": now}))
            doc["_id"] = ObjectId()
            docs.append(doc)
        if not docs:
            return 0
        with deadline(self.list_timeout, "insert sample movies"):
            result = self.collection.insert_many(docs)
        return len(result.inserted_ids)
