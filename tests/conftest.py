"""
tests/conftest.py

Shared fixtures: an in-memory SQLite catalog store, a FastAPI test client
bound to it, and an async byte source that hands out fixed-size chunks.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from app.domain.product import ValidatedProduct
from app.main import create_app
from app.repositories.catalog_store import CatalogStore


class ChunkedByteSource:
    """Async byte source returning at most ``chunk_size`` bytes per read."""

    def __init__(self, data: bytes, chunk_size: int) -> None:
        self._data = data
        self._chunk_size = max(1, chunk_size)
        self._offset = 0
        self.reads = 0

    async def read(self, size: int = -1) -> bytes:
        self.reads += 1
        step = self._chunk_size if size < 0 else min(size, self._chunk_size)
        chunk = self._data[self._offset : self._offset + step]
        self._offset += len(chunk)
        return chunk


@pytest.fixture()
def make_source() -> Callable[..., ChunkedByteSource]:
    def _make(data: str | bytes, chunk_size: int = 64 * 1024) -> ChunkedByteSource:
        payload = data.encode("utf-8") if isinstance(data, str) else data
        return ChunkedByteSource(payload, chunk_size)

    return _make


@pytest.fixture()
def store() -> Iterator[CatalogStore]:
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    catalog_store = CatalogStore(engine)
    catalog_store.create_schema()
    yield catalog_store
    engine.dispose()


@pytest.fixture()
def client(store: CatalogStore) -> Iterator[TestClient]:
    with TestClient(create_app(store=store)) as test_client:
        yield test_client


def make_product(sku: str, **overrides: object) -> ValidatedProduct:
    fields: dict[str, object] = {
        "sku": sku,
        "name": f"Product {sku}",
        "brand": "TestBrand",
        "color": None,
        "size": None,
        "mrp": 100.0,
        "price": 80.0,
        "quantity": 10,
    }
    fields.update(overrides)
    return ValidatedProduct(**fields)  # type: ignore[arg-type]


@pytest.fixture()
def search_catalog(store: CatalogStore) -> CatalogStore:
    """Five-entry catalog used by the filter tests."""
    store.upsert_many(
        [
            make_product("A-001", name="Red T-Shirt", brand="StreamThreads", color="Red", price=500.0, mrp=800.0, quantity=10),
            make_product("B-002", name="Blue Jeans", brand="DenimWorks", color="Blue", price=1500.0, mrp=2000.0, quantity=5),
            make_product("C-003", name="Green Polo", brand="StreamThreads", color="Green", price=1200.0, mrp=1500.0, quantity=8),
            make_product("D-004", name="Black Jacket", brand="UrbanEdge", color="Black", price=3000.0, mrp=4000.0, quantity=3),
            make_product("E-005", name="Red Sneakers", brand="UrbanEdge", color="Red", price=2500.0, mrp=3000.0, quantity=7),
        ]
    )
    return store


@pytest.fixture()
def fifteen_products(store: CatalogStore) -> CatalogStore:
    store.upsert_many([make_product(f"SKU-{i}") for i in range(1, 16)])
    return store


@pytest.fixture()
def product_factory() -> Callable[..., ValidatedProduct]:
    return make_product
