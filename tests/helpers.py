"""Shared test scaffolding: in-memory SQLite with the real schema and seeded roles."""

import unittest

from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cinereserva.core.database import build_engine
from cinereserva.models import Base
from cinereserva.services.seed import seed_default_roles

# StaticPool keeps one connection so every session sees the same in-memory database.
TEST_DATABASE_URL = "sqlite://"


class SqliteTestCase(unittest.TestCase):
    """Fresh schema per test; ROLE_USER and ROLE_ADMIN already seeded."""

    def setUp(self) -> None:
        self.engine = build_engine(TEST_DATABASE_URL, poolclass=StaticPool)
        Base.metadata.create_all(self.engine)
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.db = self.session_factory()
        seed_default_roles(self.db)

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()
