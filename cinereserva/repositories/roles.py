"""Queries and commands for roles."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cinereserva.core.database import store_errors
from cinereserva.core.errors import ConflictError
from cinereserva.models import Role


def get_role_by_name(db: Session, name: str) -> Role | None:
    with store_errors("get role by name"):
        return db.execute(select(Role).where(Role.name == name)).scalar_one_or_none()


def get_role_by_id(db: Session, role_id: int) -> Role | None:
    with store_errors("get role by id"):
        return db.execute(select(Role).where(Role.id == role_id)).scalar_one_or_none()


def list_roles(db: Session) -> list[Role]:
    with store_errors("list roles"):
        return list(db.execute(select(Role).order_by(Role.name)).scalars().all())


def create_role(db: Session, name: str) -> Role:
    """Insert a role; duplicate names raise ConflictError."""
    role = Role(name=name)
    with store_errors("create role"):
        db.add(role)
        try:
            db.flush()
        except IntegrityError as e:
            raise ConflictError(f"El rol {name} ya existe") from e
    return role
