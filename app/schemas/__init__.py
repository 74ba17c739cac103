"""
app/schemas package marker.
"""

from app.schemas.product import (
    MessageResponse,
    ProductPageResponse,
    ProductResponse,
    RejectedRowResponse,
    UploadSummaryResponse,
)

__all__ = [
    "MessageResponse",
    "ProductPageResponse",
    "ProductResponse",
    "RejectedRowResponse",
    "UploadSummaryResponse",
]
