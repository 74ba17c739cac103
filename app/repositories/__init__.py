"""
app/repositories package marker.
"""

from app.repositories.catalog_store import CatalogStore, CatalogStoreError

__all__ = [
    "CatalogStore",
    "CatalogStoreError",
]
