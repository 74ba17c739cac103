"""
app/repositories/catalog_store.py

Persistence layer for catalog entries.

One CatalogStore is built per process and shared by every request. Each
operation opens its own short-lived session, so concurrent requests never
share a session. Per-SKU atomicity comes from a single
``INSERT ... ON CONFLICT (sku) DO UPDATE`` statement per chunk.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from sqlalchemy import func, select, text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.product import CatalogEntry, ProductFilter, ValidatedProduct
from db.base import Base
from db.models.product import Product
from db.session import build_session_factory

logger = logging.getLogger(__name__)

_DEFAULT_BATCH_SIZE = 1000
_MUTABLE_COLUMNS: tuple[str, ...] = ("name", "brand", "color", "size", "mrp", "price", "quantity")
_LIKE_ESCAPE = "\\"

_INSERT_BY_DIALECT: dict[str, Callable[..., Any]] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class CatalogStoreError(RuntimeError):
    """
    Raised when the catalog store cannot complete an operation.
    """


class CatalogStore:
    """
    Upsert-by-SKU persistence plus paged and filtered reads.
    """

    def __init__(self, engine: Engine, *, batch_size: int = _DEFAULT_BATCH_SIZE) -> None:
        self._engine = engine
        self._session_factory = build_session_factory(engine)
        self._batch_size = max(1, batch_size)

    @property
    def engine(self) -> Engine:
        return self._engine

    def create_schema(self) -> None:
        """Create missing catalog tables. Existing tables are left untouched."""
        Base.metadata.create_all(bind=self._engine)

    def ping(self) -> None:
        """Run SELECT 1. Raises CatalogStoreError if the store is unreachable."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise CatalogStoreError("Database unavailable.") from exc

    def dispose(self) -> None:
        self._engine.dispose()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def upsert_many(self, products: Sequence[ValidatedProduct]) -> int:
        """
        Create-or-replace every product keyed on sku, in one transaction.

        Mutable fields are overwritten and updated_at is refreshed; id, sku
        and created_at of existing entries are kept. When a sku appears more
        than once, the last occurrence wins. Returns the number of distinct
        skus written.
        """

        if not products:
            return 0

        payloads = self._deduplicate_payloads(products)
        try:
            with self._session_factory() as session, session.begin():
                insert = self._insert_for(session)
                for start in range(0, len(payloads), self._batch_size):
                    chunk = payloads[start : start + self._batch_size]
                    stmt = insert(Product).values(chunk)
                    update_columns: dict[str, Any] = {
                        column: stmt.excluded[column] for column in _MUTABLE_COLUMNS
                    }
                    update_columns["updated_at"] = func.now()
                    stmt = stmt.on_conflict_do_update(
                        index_elements=[Product.sku],
                        set_=update_columns,
                    )
                    session.execute(stmt)
        except SQLAlchemyError as exc:
            logger.exception("Catalog upsert failed for %d product(s)", len(payloads))
            raise CatalogStoreError(str(exc.orig) if getattr(exc, "orig", None) else str(exc)) from exc

        return len(payloads)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_page(self, *, offset: int, limit: int) -> tuple[list[CatalogEntry], int]:
        """
        Return ``limit`` entries starting at ``offset`` in insertion order,
        together with the total entry count.
        """

        try:
            with self._session_factory() as session:
                total = session.scalar(select(func.count()).select_from(Product)) or 0
                rows = session.scalars(
                    select(Product)
                    .order_by(Product.id)
                    .offset(max(0, offset))
                    .limit(max(1, limit))
                ).all()
                return [self._to_entry(row) for row in rows], int(total)
        except SQLAlchemyError as exc:
            logger.exception("Catalog page query failed offset=%s limit=%s", offset, limit)
            raise CatalogStoreError(str(exc)) from exc

    def find_by_filter(self, criteria: ProductFilter) -> list[CatalogEntry]:
        """
        Return every entry matching ``criteria`` in insertion order.
        """

        stmt = select(Product).order_by(Product.id)
        for column, needle in (
            (Product.brand, criteria.brand),
            (Product.name, criteria.name),
            (Product.color, criteria.color),
        ):
            if needle:
                stmt = stmt.where(column.ilike(f"%{_escape_like(needle)}%", escape=_LIKE_ESCAPE))
        if criteria.min_price is not None:
            stmt = stmt.where(Product.price >= criteria.min_price)
        if criteria.max_price is not None:
            stmt = stmt.where(Product.price <= criteria.max_price)

        try:
            with self._session_factory() as session:
                return [self._to_entry(row) for row in session.scalars(stmt).all()]
        except SQLAlchemyError as exc:
            logger.exception("Catalog filter query failed criteria=%r", criteria)
            raise CatalogStoreError(str(exc)) from exc

    def count(self) -> int:
        try:
            with self._session_factory() as session:
                return int(session.scalar(select(func.count()).select_from(Product)) or 0)
        except SQLAlchemyError as exc:
            raise CatalogStoreError(str(exc)) from exc

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _insert_for(self, session: Session) -> Callable[..., Any]:
        dialect = session.get_bind().dialect.name
        try:
            return _INSERT_BY_DIALECT[dialect]
        except KeyError:
            raise CatalogStoreError(f"Upsert is not supported for the {dialect!r} dialect.") from None

    @staticmethod
    def _deduplicate_payloads(products: Sequence[ValidatedProduct]) -> list[dict[str, Any]]:
        by_sku: dict[str, dict[str, Any]] = {}
        for product in products:
            by_sku[product.sku] = {
                "sku": product.sku,
                "name": product.name,
                "brand": product.brand,
                "color": product.color,
                "size": product.size,
                "mrp": product.mrp,
                "price": product.price,
                "quantity": product.quantity,
            }
        return list(by_sku.values())

    @staticmethod
    def _to_entry(row: Product) -> CatalogEntry:
        return CatalogEntry(
            id=row.id,
            sku=row.sku,
            name=row.name,
            brand=row.brand,
            color=row.color,
            size=row.size,
            mrp=row.mrp,
            price=row.price,
            quantity=row.quantity,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


def _escape_like(value: str) -> str:
    return (
        value.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", f"{_LIKE_ESCAPE}%")
        .replace("_", f"{_LIKE_ESCAPE}_")
    )
