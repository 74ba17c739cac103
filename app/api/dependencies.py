"""
app/api/dependencies.py

Shared FastAPI dependencies.

The catalog store is built once in the application lifespan and kept on
``app.state``; services are thin wrappers created per request around it.
"""

from __future__ import annotations

from fastapi import Depends, Request

from app.repositories.catalog_store import CatalogStore
from app.services.catalog_query_service import CatalogQueryService
from app.services.product_ingestion_service import (
    ProductIngestionService,
    build_product_ingestion_service,
)


def get_catalog_store(request: Request) -> CatalogStore:
    """
    Return the process-wide catalog store handle.
    """

    store: CatalogStore | None = getattr(request.app.state, "catalog_store", None)
    if store is None:
        raise RuntimeError("Catalog store is not initialised; was the lifespan started?")
    return store


def get_product_ingestion_service(
    store: CatalogStore = Depends(get_catalog_store),
) -> ProductIngestionService:
    return build_product_ingestion_service(store)


def get_catalog_query_service(
    store: CatalogStore = Depends(get_catalog_store),
) -> CatalogQueryService:
    return CatalogQueryService(store)
