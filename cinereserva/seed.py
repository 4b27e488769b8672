"""
CLI entrypoint for seeding both stores outside of app startup, e.g.:

  python -m cinereserva.seed            # roles and sample movies
  python -m cinereserva.seed --roles    # roles only
"""

import argparse
import logging
import sys

from cinereserva.api.v1.movies import get_movie_repository
from cinereserva.core.config import get_settings
from cinereserva.core.database import SessionLocal, engine
from cinereserva.core.errors import StoreError
from cinereserva.models import Base
from cinereserva.services.seed import seed_default_roles, seed_sample_movies

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Create tables if configured, seed roles, then sample movies unless --roles."""
    parser = argparse.ArgumentParser(description="Seed CineReserva stores.")
    parser.add_argument("--roles", action="store_true", help="Seed roles only")
    args = parser.parse_args(argv)

    settings = get_settings()
    db = SessionLocal()
    try:
        if settings.DB_CREATE_TABLES:
            Base.metadata.create_all(bind=engine)
        created = seed_default_roles(db)
        logger.info("Roles seeded: created=%s", created)
        if not args.roles:
            inserted = seed_sample_movies(get_movie_repository())
            logger.info("Movies seeded: inserted=%s", inserted)
        return 0
    except StoreError as e:
        logger.exception("Seeding failed: %s", e.message)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
