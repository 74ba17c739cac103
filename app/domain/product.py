"""
app/domain/product.py

Domain models used by the catalog ingestion and query flows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

# One decoded CSV data line keyed by header name. Values are None when the
# line is shorter than the header.
RawRow = Mapping[str, Any]


class RejectionReason:
    """
    Fixed taxonomy of row rejection reasons, in rule evaluation order.

    mrp and price negativity is not part of this taxonomy; only the store
    schema rejects it.
    """

    MISSING_REQUIRED_FIELDS = "Missing required fields."
    INVALID_NUMBER_FORMAT = "Invalid number format for MRP, Price, or Quantity."
    PRICE_ABOVE_MRP = "Price cannot be greater than MRP."
    NEGATIVE_QUANTITY = "Quantity can't be negative."


@dataclass(frozen=True)
class ValidatedProduct:
    """
    Product row that passed every validation rule.
    """

    sku: str
    name: str
    brand: str
    color: str | None
    size: str | None
    mrp: float
    price: float
    quantity: int


@dataclass(frozen=True)
class RejectionRecord:
    """
    One rejected CSV data row.
    """

    row: int
    data: dict[str, Any]
    reason: str


@dataclass(frozen=True)
class IngestionSummary:
    """
    End-of-upload summary.
    """

    stored: int
    failed: int
    rejections: list[RejectionRecord] = field(default_factory=list)


@dataclass(frozen=True)
class CatalogEntry:
    """
    Persisted product as read back from the catalog store.
    """

    id: int
    sku: str
    name: str
    brand: str
    color: str | None
    size: str | None
    mrp: float
    price: float
    quantity: int
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ProductFilter:
    """
    Search criteria. Text fields match case-insensitive substrings; price
    bounds are inclusive. None means "not constrained".
    """

    brand: str | None = None
    name: str | None = None
    color: str | None = None
    min_price: float | None = None
    max_price: float | None = None


@dataclass(frozen=True)
class ProductPage:
    """
    One page of the catalog listing.
    """

    products: list[CatalogEntry]
    total_products: int
    total_pages: int
    current_page: int
