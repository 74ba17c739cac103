"""
app/validators package marker.
"""

from app.validators.product_row_validator import REQUIRED_FIELDS, ProductRowValidator

__all__ = [
    "REQUIRED_FIELDS",
    "ProductRowValidator",
]
