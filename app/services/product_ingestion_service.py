"""
app/services/product_ingestion_service.py

Service layer for product CSV ingestion.

One upload runs through three stages:

    1. CSVRowStream decodes the byte stream into raw rows, lazily
    2. ProductRowValidator partitions rows into accepted / rejected, in file order
    3. CatalogStore.upsert_many persists all accepted rows in one call

Row-level failures are data, never exceptions. Decode failures abort with
CSVParseError and store failures with CatalogPersistenceError. Nothing is
written unless the whole stream was read.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Awaitable, Callable

from fastapi.concurrency import run_in_threadpool

from app.config import get_csv_ingestion_settings
from app.domain.product import IngestionSummary, RejectionRecord, ValidatedProduct
from app.parsers.csv_row_stream import DEFAULT_CHUNK_SIZE, AsyncByteSource, CSVRowStream
from app.repositories.catalog_store import CatalogStore, CatalogStoreError
from app.validators.product_row_validator import ProductRowValidator

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CSVUploadMissingError(ValueError):
    """
    Raised when no file is attached to the upload request.
    """


class CSVParseError(ValueError):
    """
    Raised when the uploaded stream cannot be decoded as UTF-8 CSV.
    """


class CatalogPersistenceError(RuntimeError):
    """
    Raised when validated rows cannot be written to the catalog store.
    """


class IngestionCancelledError(RuntimeError):
    """
    Raised when the client went away before the stream was fully read.
    """


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class ProductIngestionService:
    """
    Coordinates CSV decoding, row validation and the catalog batch upsert.

    Holds no per-upload state; concurrent uploads can share one instance.
    """

    def __init__(
        self,
        *,
        store: CatalogStore,
        read_chunk_size: int = DEFAULT_CHUNK_SIZE,
        log_validation_errors: bool = True,
        disconnect_check_interval: int = 500,
        validator: ProductRowValidator | None = None,
    ) -> None:
        self._store = store
        self._read_chunk_size = max(1, read_chunk_size)
        self._log_validation_errors = log_validation_errors
        self._disconnect_check_interval = max(1, disconnect_check_interval)
        self._validator = validator or ProductRowValidator()

    async def ingest_csv(
        self,
        *,
        upload_file: AsyncByteSource | None,
        is_disconnected: Callable[[], Awaitable[bool]] | None = None,
    ) -> IngestionSummary:
        """
        Validate every row of ``upload_file`` and upsert the valid ones.

        Args:
            upload_file:      Async byte source holding a UTF-8 CSV document
                              with a header line. None means nothing was attached.
            is_disconnected:  Optional probe polled while reading; when it
                              returns True the upload is abandoned before any
                              write happens.

        Returns:
            IngestionSummary with stored / failed counts and the rejected rows
            in ascending row order.
        """

        if upload_file is None:
            raise CSVUploadMissingError("No file found. Please upload a CSV file.")

        accepted: list[ValidatedProduct] = []
        rejections: list[RejectionRecord] = []
        rows = CSVRowStream(upload_file, chunk_size=self._read_chunk_size)

        try:
            async for row_number, raw_row in _enumerate_async(rows, start=1):
                if row_number % self._disconnect_check_interval == 0:
                    await self._raise_if_disconnected(is_disconnected, row_number)

                product, reason = self._validator.validate_row(raw_row)
                if product is not None:
                    accepted.append(product)
                    continue
                self._record_rejection(
                    rejections,
                    RejectionRecord(row=row_number, data=dict(raw_row), reason=str(reason)),
                )
        except UnicodeDecodeError as exc:
            raise CSVParseError(f"CSV must be UTF-8 encoded: {exc.reason}") from exc
        except csv.Error as exc:
            raise CSVParseError(f"Invalid CSV format: {exc}") from exc

        await self._raise_if_disconnected(is_disconnected, len(accepted) + len(rejections))

        if accepted:
            await self._persist(accepted)

        summary = IngestionSummary(
            stored=len(accepted),
            failed=len(rejections),
            rejections=rejections,
        )
        logger.info(
            "Product CSV ingested stored=%d failed=%d",
            summary.stored,
            summary.failed,
        )
        return summary

    # ------------------------------------------------------------------
    # Ingestion internals
    # ------------------------------------------------------------------

    async def _persist(self, accepted: list[ValidatedProduct]) -> None:
        try:
            written = await run_in_threadpool(self._store.upsert_many, accepted)
        except CatalogStoreError as exc:
            raise CatalogPersistenceError("Failed to persist valid product rows.") from exc
        if written != len(accepted):
            logger.info(
                "Upload repeated %d sku(s); last occurrence kept",
                len(accepted) - written,
            )

    async def _raise_if_disconnected(
        self,
        is_disconnected: Callable[[], Awaitable[bool]] | None,
        rows_read: int,
    ) -> None:
        if is_disconnected is None:
            return
        if await is_disconnected():
            logger.warning("Client disconnected after %d row(s); upload abandoned", rows_read)
            raise IngestionCancelledError("Client disconnected before the upload completed.")

    def _record_rejection(
        self,
        rejections: list[RejectionRecord],
        rejection: RejectionRecord,
    ) -> None:
        if self._log_validation_errors:
            logger.warning(
                "Product CSV row rejected row=%s reason=%s sku=%r",
                rejection.row,
                rejection.reason,
                rejection.data.get("sku"),
            )
        rejections.append(rejection)


async def _enumerate_async(rows: CSVRowStream, *, start: int = 0):
    index = start
    async for row in rows:
        yield index, row
        index += 1


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def build_product_ingestion_service(store: CatalogStore) -> ProductIngestionService:
    """
    Build the ingestion service around ``store`` with env-driven settings.
    """

    settings = get_csv_ingestion_settings()
    return ProductIngestionService(
        store=store,
        read_chunk_size=settings.read_chunk_size,
        log_validation_errors=settings.log_validation_errors,
        disconnect_check_interval=settings.disconnect_check_interval,
    )
