"""
app/domain package marker.
"""

from app.domain.product import (
    CatalogEntry,
    IngestionSummary,
    ProductFilter,
    ProductPage,
    RawRow,
    RejectionReason,
    RejectionRecord,
    ValidatedProduct,
)

__all__ = [
    "CatalogEntry",
    "IngestionSummary",
    "ProductFilter",
    "ProductPage",
    "RawRow",
    "RejectionReason",
    "RejectionRecord",
    "ValidatedProduct",
]
