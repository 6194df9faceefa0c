"""
app/repositories package marker.
"""

from app.repositories.product_review_repository import (
    ProductNotFoundError,
    ProductReviewRepository,
    to_product_gid,
)

__all__ = [
    "ProductNotFoundError",
    "ProductReviewRepository",
    "to_product_gid",
]
