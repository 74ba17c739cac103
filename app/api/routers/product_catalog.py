"""
app/api/routers/product_catalog.py

Catalog listing and search endpoints.
"""

from __future__ import annotations

import math

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_catalog_query_service
from app.api.errors import CatalogAPIError
from app.domain.product import ProductFilter
from app.repositories.catalog_store import CatalogStoreError
from app.schemas.product import MessageResponse, ProductPageResponse, ProductResponse
from app.services.catalog_query_service import DEFAULT_LIMIT, DEFAULT_PAGE, CatalogQueryService

router = APIRouter(prefix="/api", tags=["products"])


@router.get(
    "/products",
    response_model=ProductPageResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": MessageResponse}},
)
def list_products(
    page: str | None = Query(default=None, description=f"1-based page number (default {DEFAULT_PAGE})"),
    limit: str | None = Query(default=None, description=f"Page size (default {DEFAULT_LIMIT})"),
    query_service: CatalogQueryService = Depends(get_catalog_query_service),
) -> ProductPageResponse:
    """
    List catalog entries one page at a time, in insertion order.

    Missing, non-numeric or non-positive paging values fall back to defaults.
    """

    try:
        result = query_service.list_products(
            page=_parse_positive_int(page, DEFAULT_PAGE),
            limit=_parse_positive_int(limit, DEFAULT_LIMIT),
        )
    except CatalogStoreError as exc:
        raise CatalogAPIError("Error fetching products.", error=str(exc)) from exc

    return ProductPageResponse(
        total_products=result.total_products,
        total_pages=result.total_pages,
        current_page=result.current_page,
        products=[ProductResponse.model_validate(entry) for entry in result.products],
    )


@router.get(
    "/products/search",
    response_model=list[ProductResponse],
    responses={
        status.HTTP_404_NOT_FOUND: {"model": MessageResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": MessageResponse},
    },
)
def search_products(
    brand: str | None = Query(default=None, description="Case-insensitive substring"),
    name: str | None = Query(default=None, description="Case-insensitive substring"),
    color: str | None = Query(default=None, description="Case-insensitive substring"),
    min_price: str | None = Query(default=None, alias="minPrice", description="Inclusive lower price bound"),
    max_price: str | None = Query(default=None, alias="maxPrice", description="Inclusive upper price bound"),
    query_service: CatalogQueryService = Depends(get_catalog_query_service),
) -> list[ProductResponse]:
    """
    Filter catalog entries; 404 when nothing matches.
    """

    criteria = ProductFilter(
        brand=brand or None,
        name=name or None,
        color=color or None,
        min_price=_parse_price_bound(min_price),
        max_price=_parse_price_bound(max_price),
    )
    try:
        entries = query_service.search_products(criteria)
    except CatalogStoreError as exc:
        raise CatalogAPIError("Error fetching products.", error=str(exc)) from exc

    if not entries:
        raise CatalogAPIError(
            "No products found matching required criteria.",
            status_code=status.HTTP_404_NOT_FOUND,
        )
    return [ProductResponse.model_validate(entry) for entry in entries]


def _parse_positive_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value >= 1 else default


def _parse_price_bound(raw: str | None) -> float | None:
    # An unparsable bound is kept as NaN so it matches nothing.
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw.strip())
    except ValueError:
        return math.nan
