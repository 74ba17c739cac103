"""
app/api/routers/product_upload.py

Product CSV upload endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Request, UploadFile, status

from app.api.dependencies import get_product_ingestion_service
from app.api.errors import CatalogAPIError
from app.schemas.product import MessageResponse, RejectedRowResponse, UploadSummaryResponse
from app.services.product_ingestion_service import (
    CatalogPersistenceError,
    CSVParseError,
    CSVUploadMissingError,
    IngestionCancelledError,
    ProductIngestionService,
)

# nginx's "client closed request"; only ever seen in logs.
HTTP_499_CLIENT_CLOSED_REQUEST = 499

router = APIRouter(prefix="/api", tags=["products"])


@router.post(
    "/upload",
    status_code=status.HTTP_201_CREATED,
    response_model=UploadSummaryResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": MessageResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": MessageResponse},
    },
)
async def upload_products(
    request: Request,
    file: UploadFile | None = File(default=None, description="Product catalog CSV"),
    ingestion_service: ProductIngestionService = Depends(get_product_ingestion_service),
) -> UploadSummaryResponse:
    """
    Validate a product CSV and upsert its valid rows by SKU.
    """

    try:
        summary = await ingestion_service.ingest_csv(
            upload_file=file,
            is_disconnected=request.is_disconnected,
        )
    except CSVUploadMissingError as exc:
        raise CatalogAPIError(str(exc), status_code=status.HTTP_400_BAD_REQUEST) from exc
    except CSVParseError as exc:
        raise CatalogAPIError("Error in parsing CSV file.", error=str(exc)) from exc
    except CatalogPersistenceError as exc:
        raise CatalogAPIError(
            "Error storing Product Details in the database.",
            error=str(exc.__cause__ or exc),
        ) from exc
    except IngestionCancelledError as exc:
        raise CatalogAPIError(str(exc), status_code=HTTP_499_CLIENT_CLOSED_REQUEST) from exc
    finally:
        if file is not None:
            await file.close()

    return UploadSummaryResponse(
        stored=summary.stored,
        failed=summary.failed,
        failed_details=[
            RejectedRowResponse(row=rejection.row, data=rejection.data, reason=rejection.reason)
            for rejection in summary.rejections
        ],
    )
