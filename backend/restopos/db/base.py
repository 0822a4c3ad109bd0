"""SQLAlchemy declarative base and common utilities."""

from sqlalchemy import Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class VersionMixin:
    """Optimistic locking via a version counter.

    Models using this mixin gain a ``version`` column that starts at 1.
    The stored value mirrors the domain object's version, which is bumped
    on every mutation by the order lifecycle manager.
    """

    version: Mapped[int] = mapped_column(Integer, default=1, server_default="1", nullable=False)