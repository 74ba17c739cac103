"""
app/schemas/product.py

Response schemas for the product upload and catalog endpoints.

Attribute names are snake_case; the wire names are camelCase via
serialization aliases, which FastAPI applies when rendering responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RejectedRowResponse(BaseModel):
    """
    One rejected CSV row in the upload summary.
    """

    row: int = Field(..., ge=1)
    data: dict[str, Any]
    reason: str


class UploadSummaryResponse(BaseModel):
    """
    Result of one CSV upload.
    """

    message: str = "CSV data processed successfully."
    stored: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    failed_details: list[RejectedRowResponse] = Field(
        default_factory=list,
        serialization_alias="failedDetails",
    )


class ProductResponse(BaseModel):
    """
    One catalog entry.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    sku: str
    name: str
    brand: str
    color: str | None = None
    size: str | None = None
    mrp: float
    price: float
    quantity: int
    created_at: datetime = Field(..., serialization_alias="createdAt")
    updated_at: datetime = Field(..., serialization_alias="updatedAt")


class ProductPageResponse(BaseModel):
    """
    Paged catalog listing.
    """

    total_products: int = Field(..., ge=0, serialization_alias="totalProducts")
    total_pages: int = Field(..., ge=0, serialization_alias="totalPages")
    current_page: int = Field(..., ge=1, serialization_alias="currentPage")
    products: list[ProductResponse] = Field(default_factory=list)


class MessageResponse(BaseModel):
    """
    Error body: a message plus, for server faults, the underlying error text.
    """

    message: str
    error: str | None = None
