from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateTable
from sqlalchemy.pool import StaticPool

from app.domain.product import ProductFilter
from app.repositories.catalog_store import CatalogStore, CatalogStoreError
from db.models import Product


class TestUpsertMany:
    def test_empty_batch_is_a_no_op(self, store: CatalogStore) -> None:
        assert store.upsert_many([]) == 0
        assert store.count() == 0

    def test_insert_then_replace_mutable_fields(self, store: CatalogStore, product_factory) -> None:
        store.upsert_many([product_factory("SKU-1", name="Old", price=50.0, quantity=1)])
        (before,), _ = store.find_page(offset=0, limit=10)

        written = store.upsert_many(
            [product_factory("SKU-1", name="New", brand="Other", color="Blue", size="L", mrp=300.0, price=250.0, quantity=9)]
        )
        (after,), total = store.find_page(offset=0, limit=10)

        assert written == 1
        assert total == 1
        assert after.id == before.id
        assert after.created_at == before.created_at
        assert after.updated_at >= before.updated_at
        assert (after.name, after.brand, after.color, after.size) == ("New", "Other", "Blue", "L")
        assert (after.mrp, after.price, after.quantity) == (300.0, 250.0, 9)

    def test_duplicate_skus_collapse_to_last(self, store: CatalogStore, product_factory) -> None:
        written = store.upsert_many(
            [
                product_factory("SKU-1", name="first"),
                product_factory("SKU-2"),
                product_factory("SKU-1", name="last"),
            ]
        )

        entries, total = store.find_page(offset=0, limit=10)
        assert written == 2
        assert total == 2
        assert entries[0].sku == "SKU-1" and entries[0].name == "last"

    def test_statement_chunking_writes_everything(self, product_factory) -> None:
        engine = create_engine(
            "sqlite+pysqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        small_batches = CatalogStore(engine, batch_size=2)
        small_batches.create_schema()

        written = small_batches.upsert_many([product_factory(f"SKU-{i}") for i in range(5)])

        assert written == 5
        assert small_batches.count() == 5
        engine.dispose()

    def test_constraint_violation_rolls_back_whole_batch(self, store: CatalogStore, product_factory) -> None:
        with pytest.raises(CatalogStoreError):
            store.upsert_many(
                [
                    product_factory("OK-1"),
                    product_factory("BAD-1", mrp=-1.0, price=-5.0),
                ]
            )

        assert store.count() == 0


class TestReads:
    def test_find_page_uses_insertion_order(self, fifteen_products: CatalogStore) -> None:
        entries, total = fifteen_products.find_page(offset=5, limit=5)

        assert total == 15
        assert [e.sku for e in entries] == [f"SKU-{i}" for i in range(6, 11)]

    def test_find_page_past_the_end_is_empty(self, fifteen_products: CatalogStore) -> None:
        entries, total = fifteen_products.find_page(offset=100, limit=5)
        assert entries == []
        assert total == 15

    def test_filter_is_case_insensitive_substring(self, search_catalog: CatalogStore) -> None:
        entries = search_catalog.find_by_filter(ProductFilter(brand="streamthreads"))
        assert [e.sku for e in entries] == ["A-001", "C-003"]

        entries = search_catalog.find_by_filter(ProductFilter(name="JEANS"))
        assert [e.sku for e in entries] == ["B-002"]

    def test_filter_combines_criteria(self, search_catalog: CatalogStore) -> None:
        entries = search_catalog.find_by_filter(ProductFilter(color="red", max_price=1000.0))
        assert [e.sku for e in entries] == ["A-001"]

    def test_price_bounds_are_inclusive(self, search_catalog: CatalogStore) -> None:
        entries = search_catalog.find_by_filter(ProductFilter(min_price=1500.0, max_price=2500.0))
        assert [e.sku for e in entries] == ["B-002", "E-005"]

    def test_like_wildcards_are_literal(self, search_catalog: CatalogStore) -> None:
        assert search_catalog.find_by_filter(ProductFilter(name="%")) == []
        assert search_catalog.find_by_filter(ProductFilter(name="_")) == []

    def test_ping_succeeds_on_live_store(self, store: CatalogStore) -> None:
        store.ping()


class TestPostgresColumnTypes:
    def test_text_columns_are_unbounded_and_quantity_is_64_bit(self) -> None:
        ddl = str(CreateTable(Product.__table__).compile(dialect=postgresql.dialect()))

        assert "VARCHAR" not in ddl
        for column in ("sku", "name", "brand", "color", "size"):
            assert f"{column} TEXT" in ddl
        assert "quantity BIGINT" in ddl
