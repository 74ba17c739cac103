"""
db/base.py

Declarative base and shared column helpers for the catalog models.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import BigInteger, DateTime, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# SQLite only autoincrements INTEGER PRIMARY KEY columns.
BigIntegerPK = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    """
    Catalog-wide declarative base.
    All models must inherit from this class.
    """

    type_annotation_map: dict[type, Any] = {}


class TimestampMixin:
    """
    Adds store-maintained created_at / updated_at columns.

    created_at is written once on INSERT. updated_at is refreshed on ORM
    updates via onupdate; bulk upserts set it explicitly.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=lambda: datetime.now(timezone.utc),
    )
