from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, status
from fastapi.responses import JSONResponse, PlainTextResponse

from app.api.dependencies import get_catalog_store
from app.api.errors import register_error_handlers
from app.config import get_catalog_store_settings, get_csv_ingestion_settings, get_server_settings
from app.repositories.catalog_store import CatalogStore, CatalogStoreError

logger = logging.getLogger(__name__)


def _validate_env() -> None:
    """
    Validate the environment needed to build the catalog store.

    Raises RuntimeError listing every problem so the operator can fix them
    in one restart cycle.
    """

    from db.config import load_env_files

    load_env_files()

    errors: list[str] = []

    if not os.getenv("DATABASE_URL", "").strip():
        errors.append("DATABASE_URL is not set. It must point at the catalog PostgreSQL database.")

    raw_port = os.getenv("PORT", "").strip()
    if raw_port and not raw_port.isdigit():
        errors.append(f"PORT='{raw_port}' is not a valid port number.")

    if errors:
        raise RuntimeError(
            "Startup validation failed, missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = get_server_settings().log_level
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _build_store() -> CatalogStore:
    from db.session import create_db_engine

    return CatalogStore(
        create_db_engine(),
        batch_size=get_csv_ingestion_settings().upsert_batch_size,
    )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Build (or adopt) the catalog store, prepare the schema, and release it on exit."""
    owns_store = getattr(application.state, "catalog_store", None) is None
    if owns_store:
        _validate_env()
        application.state.catalog_store = _build_store()

    store: CatalogStore = application.state.catalog_store
    if get_catalog_store_settings().auto_create_schema:
        store.create_schema()
        logger.info("Catalog schema ensured")
    store.ping()
    logger.info("Catalog store connectivity confirmed")
    try:
        yield
    finally:
        if owns_store:
            store.dispose()
            application.state.catalog_store = None
            logger.info("Catalog store disposed")


def create_app(*, store: CatalogStore | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Pass ``store`` to run against an existing catalog store instead of one
    built from DATABASE_URL at startup.
    """

    _configure_logging()

    application = FastAPI(
        title="Product Service API",
        version="1.0.0",
        description="API to manage product data",
        lifespan=_lifespan,
    )
    application.state.catalog_store = store
    register_error_handlers(application)

    from app.api.routers import product_catalog_router, product_upload_router

    application.include_router(product_upload_router)
    application.include_router(product_catalog_router)

    @application.get("/", response_class=PlainTextResponse)
    def root() -> str:
        return "Product API Service is running."

    @application.get("/health")
    def healthcheck(catalog_store: CatalogStore = Depends(get_catalog_store)) -> JSONResponse:
        try:
            catalog_store.ping()
        except CatalogStoreError as exc:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"message": str(exc)},
            )
        return JSONResponse(content={"status": "ok"})

    return application


app = create_app()


def run() -> None:
    """Serve the API with uvicorn on HOST:PORT."""
    import uvicorn

    settings = get_server_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
