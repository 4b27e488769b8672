"""
Create a user (e.g. first admin). Run from project root:
  python -m cinereserva.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m cinereserva.scripts.create_user admin admin@cinereserva.com your-secure-password ROLE_ADMIN
"""
import argparse
import logging
import sys

from cinereserva.core.database import SessionLocal, transaction
from cinereserva.core.errors import InputValidationError, ServiceError
from cinereserva.core.security import hash_password
from cinereserva.models import User
from cinereserva.models.user import DEFAULT_ROLES, ROLE_USER
from cinereserva.repositories.roles import get_role_by_name
from cinereserva.repositories.users import add_role_to_user, create_user
from cinereserva.schemas.auth import RegisterRequest
from cinereserva.services.seed import seed_default_roles
from cinereserva.services.validation import validate_register_request

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a CineReserva user with a role.")
    parser.add_argument("username", help="Username (3-50 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (6-120 chars)")
    parser.add_argument("role", nargs="?", default=ROLE_USER, choices=list(DEFAULT_ROLES))
    args = parser.parse_args(argv)

    request = RegisterRequest(username=args.username, email=args.email, password=args.password)
    try:
        validate_register_request(request)
    except InputValidationError as e:
        print(e.message, file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        seed_default_roles(db)
        role = get_role_by_name(db, args.role)
        user = User(
            username=request.username.strip(),
            email=request.email.strip(),
            password_hash=hash_password(request.password),
        )
        with transaction(db):
            create_user(db, user)
            add_role_to_user(db, user.id, role.id)
        print(f"Created user '{args.username}' with role '{args.role}'.")
        return 0
    except ServiceError as e:
        logger.error("User creation failed: %s", e.message)
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
