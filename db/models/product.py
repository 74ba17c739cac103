"""
db/models/product.py

Persisted catalog entry, one row per SKU.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, CheckConstraint, Float, Index, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, BigIntegerPK, TimestampMixin

SKU_UNIQUE_CONSTRAINT = "uq_products_sku"


class Product(TimestampMixin, Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(
        BigIntegerPK,
        primary_key=True,
        autoincrement=True,
        comment="Surrogate key; ascending insertion order",
    )
    sku: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    brand: Mapped[str] = mapped_column(Text, nullable=False)
    color: Mapped[str | None] = mapped_column(Text, nullable=True)
    size: Mapped[str | None] = mapped_column(Text, nullable=True)
    mrp: Mapped[float] = mapped_column(Float, nullable=False, comment="Maximum retail price")
    price: Mapped[float] = mapped_column(Float, nullable=False)
    quantity: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    # Integrity backstop for the row validator; these also cover mrp/price
    # negativity, which the validator does not check.
    __table_args__ = (
        UniqueConstraint("sku", name=SKU_UNIQUE_CONSTRAINT),
        CheckConstraint("mrp >= 0", name="ck_products_mrp_non_negative"),
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        CheckConstraint("price <= mrp", name="ck_products_price_not_above_mrp"),
        CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
        Index("ix_products_price", "price"),
    )
