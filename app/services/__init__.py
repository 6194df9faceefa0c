"""
app/services package marker.
"""

from app.services.product_review_service import (
    ProductReviewService,
    ReviewNotFoundError,
    get_product_review_service,
)
from app.services.review_csv_service import (
    ReviewCSVService,
    convert_reviews_to_csv,
    get_review_csv_service,
)

__all__ = [
    "ProductReviewService",
    "ReviewNotFoundError",
    "get_product_review_service",
    "ReviewCSVService",
    "convert_reviews_to_csv",
    "get_review_csv_service",
]
