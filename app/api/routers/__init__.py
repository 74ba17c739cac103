"""
app/api/routers package marker.
"""

from app.api.routers.product_catalog import router as product_catalog_router
from app.api.routers.product_upload import router as product_upload_router

__all__ = [
    "product_catalog_router",
    "product_upload_router",
]
