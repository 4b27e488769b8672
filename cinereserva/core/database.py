"""Relational store: engine, per-request sessions, transaction scope and error wrapping."""

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from cinereserva.core.config import settings
from cinereserva.core.errors import StoreError, StoreTimeoutError

logger = logging.getLogger(__name__)

# SQLSTATE raised by PostgreSQL when statement_timeout cancels a query.
QUERY_CANCELED_PGCODE = "57014"


def build_engine(url: str, timeout_sec: float | None = None, **kwargs: Any) -> Engine:
    """
    Create an engine whose every call is bounded by *timeout_sec*.

    PostgreSQL gets a server-side statement_timeout and a pool checkout
    timeout; SQLite gets a busy timeout and per-connection foreign keys so
    the user_roles cascade behaves the same on both.
    """
    timeout = timeout_sec if timeout_sec is not None else settings.DB_TIMEOUT_SEC
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        connect_args = {"check_same_thread": False, "timeout": timeout}
    else:
        connect_args = {
            "connect_timeout": max(1, int(timeout)),
            "options": f"-c statement_timeout={int(timeout * 1000)}",
        }
        kwargs.setdefault("pool_timeout", timeout)
    connect_args.update(kwargs.pop("connect_args", {}))

    engine = create_engine(
        url,
        pool_pre_ping=True,
        echo=settings.DEBUG,
        connect_args=connect_args,
        **kwargs,
    )
    if is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Commit everything done inside the block, or roll all of it back."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """
    Translate driver errors raised inside the block into StoreError.

    *action* completes the sentence "failed to ..." and is only logged,
    never shown to API clients.
    """
    try:
        yield
    except PoolTimeoutError as e:
        raise StoreTimeoutError(f"timed out waiting for a connection to {action}") from e
    except OperationalError as e:
        if getattr(e.orig, "pgcode", None) == QUERY_CANCELED_PGCODE:
            raise StoreTimeoutError(f"timed out trying to {action}") from e
        raise StoreError(f"failed to {action}") from e
    except SQLAlchemyError as e:
        raise StoreError(f"failed to {action}") from e


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        logger.warning("Database connectivity check failed", exc_info=True)
        return False
