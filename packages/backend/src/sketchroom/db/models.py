"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Alembic migrations are written against these models.

Key concepts:
- Integer primary keys for users, rooms and diagrams
- JSON diagram payloads, stored as JSONB on PostgreSQL
- ON DELETE CASCADE from rooms to their diagrams and grants
- created_by back-references are attribution only (SET NULL on user delete)
"""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

ROLE_ADMIN = "admin"
ROLE_USER = "user"
ROLES = (ROLE_ADMIN, ROLE_USER)

# Ids are INTEGER (int4 on PostgreSQL); larger values never reach the store.
MAX_ID = 2**31 - 1

# JSON everywhere, JSONB where the backend has it.
DocumentJSON = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """A person who can log in.

    Learn: role is either "admin" or "user". Admins bypass every room
    check; users only see rooms they hold a grant on.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'user')", name="ck_users_role"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ROLE_USER
    )  # admin, user
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


class Room(Base):
    """A named scope that groups diagrams and defines who may access them."""

    __tablename__ = "rooms"
    __table_args__ = (Index("idx_rooms_created", "created_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # Relationships: the database owns the cascade (passive_deletes)
    diagrams: Mapped[list["Diagram"]] = relationship(
        back_populates="room",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    grants: Mapped[list["RoomAccess"]] = relationship(
        back_populates="room",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class RoomAccess(Base):
    """Grant — existence of (user, room) means read/write on that room.

    Learn: Composite primary key makes duplicate grants impossible, so
    granting is an INSERT ... ON CONFLICT DO NOTHING.
    """

    __tablename__ = "room_access"
    __table_args__ = (Index("idx_room_access_room", "room_id"),)

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    room_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("rooms.id", ondelete="CASCADE"), primary_key=True
    )
    granted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    room: Mapped["Room"] = relationship(back_populates="grants")


class Diagram(Base):
    """A versioned drawing document belonging to exactly one room.

    Learn: version starts at 1 and is bumped server-side
    (version = version + 1) on every payload write. Renames don't bump it.
    """

    __tablename__ = "diagrams"
    __table_args__ = (Index("idx_diagrams_room_updated", "room_id", "updated_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    room_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(DocumentJSON, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_by: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    room: Mapped["Room"] = relationship(back_populates="diagrams")
