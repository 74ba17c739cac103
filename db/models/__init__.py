"""
Model package exports.

Import all SQLAlchemy models here so metadata registration sees them
before `Base.metadata.create_all` runs.
"""

from db.models.product import Product

__all__ = [
    "Product",
]
