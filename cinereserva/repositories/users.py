"""Queries and commands for users and their role associations."""

from collections import defaultdict
from collections.abc import Sequence

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from cinereserva.core.database import store_errors
from cinereserva.core.errors import ConflictError, NotFoundError
from cinereserva.models import Role, User, user_roles

users_table = User.__table__

DUPLICATE_USER_MESSAGE = "El nombre de usuario o el email ya está en uso"
USER_NOT_FOUND_MESSAGE = "Usuario no encontrado"


def _roles_by_user(db: Session, user_ids: Sequence[int]) -> dict[int, list[Role]]:
    """One join over user_roles for all *user_ids*; roles sorted by name."""
    if not user_ids:
        return {}
    stmt = (
        select(user_roles.c.user_id, Role)
        .select_from(Role)
        .join(user_roles, Role.id == user_roles.c.role_id)
        .where(user_roles.c.user_id.in_(user_ids))
        .order_by(Role.name)
    )
    roles: dict[int, list[Role]] = defaultdict(list)
    for user_id, role in db.execute(stmt):
        roles[user_id].append(role)
    return roles


def _attach_roles(db: Session, users: Sequence[User]) -> None:
    # set_committed_value keeps the assignment out of the unit of work, so no
    # association rows are re-inserted on flush.
    roles = _roles_by_user(db, [u.id for u in users])
    for user in users:
        set_committed_value(user, "roles", roles.get(user.id, []))


def _get_user_where(db: Session, criterion, action: str) -> User | None:
    stmt = select(User).where(criterion).execution_options(populate_existing=True)
    with store_errors(action):
        user = db.execute(stmt).scalar_one_or_none()
        if user is not None:
            _attach_roles(db, [user])
    return user


def load_roles(db: Session, user_id: int) -> list[Role]:
    """Roles granted to *user_id* (empty when none or when the user is unknown)."""
    with store_errors("load user roles"):
        return _roles_by_user(db, [user_id]).get(user_id, [])


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return _get_user_where(db, User.id == user_id, "get user by id")


def get_user_by_username(db: Session, username: str) -> User | None:
    return _get_user_where(db, User.username == username, "get user by username")


def get_user_by_email(db: Session, email: str) -> User | None:
    return _get_user_where(db, User.email == email, "get user by email")


def list_users(db: Session) -> list[User]:
    """All users, newest first, each with roles attached."""
    stmt = (
        select(User)
        .order_by(User.created_at.desc(), User.id.desc())
        .execution_options(populate_existing=True)
    )
    with store_errors("list users"):
        users = list(db.execute(stmt).scalars().all())
        _attach_roles(db, users)
    return users


def username_exists(db: Session, username: str) -> bool:
    stmt = select(func.count()).select_from(users_table).where(users_table.c.username == username)
    with store_errors("check username existence"):
        return db.execute(stmt).scalar_one() > 0


def email_exists(db: Session, email: str) -> bool:
    stmt = select(func.count()).select_from(users_table).where(users_table.c.email == email)
    with store_errors("check email existence"):
        return db.execute(stmt).scalar_one() > 0


def create_user(db: Session, user: User) -> User:
    """
    Insert *user* and return it with id and timestamps populated.

    Unique violations on username or email raise ConflictError; the caller's
    transaction scope is responsible for rolling the session back.
    """
    with store_errors("create user"):
        db.add(user)
        try:
            db.flush()
        except IntegrityError as e:
            raise ConflictError(DUPLICATE_USER_MESSAGE) from e
        db.refresh(user)
        _attach_roles(db, [user])
    return user


def update_user(
    db: Session,
    user_id: int,
    *,
    username: str,
    email: str,
    first_name: str | None,
    last_name: str | None,
) -> None:
    """
    Replace the mutable profile fields of *user_id* and bump updated_at.

    Raises NotFoundError when no row matched and ConflictError when the new
    username or email belongs to someone else.
    """
    stmt = (
        update(users_table)
        .where(users_table.c.id == user_id)
        .values(
            username=username,
            email=email,
            first_name=first_name,
            last_name=last_name,
            updated_at=func.now(),
        )
    )
    with store_errors("update user"):
        try:
            result = db.execute(stmt)
        except IntegrityError as e:
            raise ConflictError(DUPLICATE_USER_MESSAGE) from e
    if result.rowcount == 0:
        raise NotFoundError(USER_NOT_FOUND_MESSAGE)


def delete_user(db: Session, user_id: int) -> None:
    """Delete *user_id*; its user_roles rows go with it. NotFoundError when nothing matched."""
    with store_errors("delete user"):
        result = db.execute(delete(users_table).where(users_table.c.id == user_id))
    if result.rowcount == 0:
        raise NotFoundError(USER_NOT_FOUND_MESSAGE)


def add_role_to_user(db: Session, user_id: int, role_id: int) -> None:
    """Grant *role_id* to *user_id*. Granting an existing role is a no-op."""
    existing = select(user_roles.c.user_id).where(
        user_roles.c.user_id == user_id,
        user_roles.c.role_id == role_id,
    )
    with store_errors("add role to user"):
        if db.execute(existing).first() is None:
            db.execute(insert(user_roles).values(user_id=user_id, role_id=role_id))
