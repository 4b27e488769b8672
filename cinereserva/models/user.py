"""ORM models for users, roles and the user_roles association."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, func
from sqlalchemy.orm import relationship

from cinereserva.models.base import Base

ROLE_USER = "ROLE_USER"
ROLE_ADMIN = "ROLE_ADMIN"
DEFAULT_ROLES = (ROLE_USER, ROLE_ADMIN)

# Many-to-many association; rows vanish with either side.
user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    """Named permission tag (ROLE_USER, ROLE_ADMIN). Immutable once seeded."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(20), nullable=False, unique=True)


class User(Base):
    """
    User account for JWT authentication.

    ``roles`` is never lazy-loaded: the repository attaches it on every read
    path, so a User handed out by the data access layer always carries its roles.
    """

    __tablename__ = "users"
    # AUTOINCREMENT on SQLite: ids of deleted users are never handed out again.
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    password_hash = Column("password", String(120), nullable=False)
    email = Column(String(80), nullable=False, unique=True, index=True)
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    roles = relationship(
        "Role",
        secondary=user_roles,
        lazy="raise",
        passive_deletes=True,
        order_by="Role.name",
    )
