# ==============================================================================
# BASE MODEL - SQLAlchemy Foundation
# ==============================================================================
# Declarative base and column helpers for the remote relational schema
# ==============================================================================

from __future__ import annotations

from typing import Any, List
from uuid import uuid4

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class SQLBase(DeclarativeBase):
    """
    Base class for all remote table models.

    Primary keys are strings generated by the caller (``prod-…``,
    ``order-…``); a UUID is used only when a row arrives without one.
    Timestamps are stored as ISO-8601 strings, the same form a hosted
    REST backend returns them in.

    Example:
        >>> class Product(SQLBase, CreatedAtMixin):
        ...     __tablename__ = "products"
        ...     name: Mapped[str] = mapped_column(String(255))
    """

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert model instance to dictionary.

        Returns:
            Dictionary with all column values keyed by column name
        """
        return {
            column.name: getattr(self, column.name)
            for column in self.__table__.columns
        }

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        return f"<{class_name}(id={self.id})>"


class CreatedAtMixin:
    """Adds the ``created_at`` ISO timestamp column."""

    created_at: Mapped[str] = mapped_column(
        String(40),
        nullable=False,
        index=True,
    )


def table_columns(table: str) -> List[str]:
    """
    Column names of a registered remote table.

    Raises:
        KeyError: If no model declares ``table``
    """
    return list(SQLBase.metadata.tables[table].columns.keys())
