from uuid import uuid4

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all models."""

    pass


def new_id() -> str:
    """Return a fresh string UUID for a primary key."""
    return str(uuid4())


class UUIDPrimaryKeyMixin:
    """Mixin providing a string UUID primary key column.

    Stored as ``String(36)`` so the same model runs on PostgreSQL and SQLite.
    """

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=new_id,
    )
