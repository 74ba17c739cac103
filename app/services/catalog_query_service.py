"""
app/services/catalog_query_service.py

Read-side façade over the catalog store: paged listing and filtered search.
"""

from __future__ import annotations

import math

from app.domain.product import CatalogEntry, ProductFilter, ProductPage
from app.repositories.catalog_store import CatalogStore

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


class CatalogQueryService:
    """
    Translates listing and search parameters into catalog store queries.
    """

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    def list_products(self, *, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT) -> ProductPage:
        """
        Return page ``page`` of size ``limit`` in insertion order.

        An empty catalog yields an empty page with zero totals.
        """

        if page < 1:
            raise ValueError("page must be >= 1")
        if limit < 1:
            raise ValueError("limit must be >= 1")

        entries, total = self._store.find_page(offset=(page - 1) * limit, limit=limit)
        return ProductPage(
            products=entries,
            total_products=total,
            total_pages=math.ceil(total / limit),
            current_page=page,
        )

    def search_products(self, criteria: ProductFilter) -> list[CatalogEntry]:
        """
        Return every entry matching ``criteria``, unpaginated.

        A NaN price bound matches nothing. Callers decide how to report an
        empty result.
        """

        for bound in (criteria.min_price, criteria.max_price):
            if bound is not None and math.isnan(bound):
                return []
        return self._store.find_by_filter(criteria)
