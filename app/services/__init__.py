"""
app/services package marker.
"""

from app.services.catalog_query_service import CatalogQueryService
from app.services.product_ingestion_service import (
    CatalogPersistenceError,
    CSVParseError,
    CSVUploadMissingError,
    IngestionCancelledError,
    ProductIngestionService,
    build_product_ingestion_service,
)

__all__ = [
    "CatalogPersistenceError",
    "CatalogQueryService",
    "CSVParseError",
    "CSVUploadMissingError",
    "IngestionCancelledError",
    "ProductIngestionService",
    "build_product_ingestion_service",
]
