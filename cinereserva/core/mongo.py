"""Document store connection for the movie catalog."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache

import pymongo
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from cinereserva.core.config import settings
from cinereserva.core.errors import StoreError, StoreTimeoutError

logger = logging.getLogger(__name__)


@lru_cache
def get_mongo_client() -> MongoClient:
    """Process-wide client; pymongo pools connections and is thread-safe."""
    return MongoClient(
        settings.MONGO_URL,
        tz_aware=True,
        serverSelectionTimeoutMS=int(settings.MONGO_TIMEOUT_SEC * 1000),
        connectTimeoutMS=int(settings.MONGO_TIMEOUT_SEC * 1000),
    )


def get_movie_collection() -> Collection:
    """Return the movies collection from the configured database."""
    db = get_mongo_client()[settings.MONGO_DATABASE]
    return db[settings.MONGO_COLLECTION]


@contextmanager
def deadline(seconds: float, action: str) -> Iterator[None]:
    """
    Run the block under a pymongo client-side timeout.

    Timeouts surface as StoreTimeoutError, every other driver error as
    StoreError; *action* completes "failed to ...".
    """
    try:
        with pymongo.timeout(seconds):
            yield
    except PyMongoError as e:
        if e.timeout:
            raise StoreTimeoutError(f"timed out trying to {action}") from e
        raise StoreError(f"failed to {action}") from e


def check_mongo_connected() -> bool:
    """Ping the server to verify the document store is reachable."""
    try:
        with pymongo.timeout(settings.MONGO_TIMEOUT_SEC):
            get_mongo_client().admin.command("ping")
        return True
    except PyMongoError:
        logger.warning("MongoDB connectivity check failed", exc_info=True)
        return False
