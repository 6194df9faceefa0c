"""
app/domain package marker.
"""

from app.domain.review_import import (
    CSVRow,
    ImportResult,
    MetafieldDefinition,
    MetafieldRef,
    ParsedProduct,
    ProductPage,
    ProductRef,
    ProductReview,
    ProductReviews,
    UploadResult,
)

__all__ = [
    "CSVRow",
    "ImportResult",
    "MetafieldDefinition",
    "MetafieldRef",
    "ParsedProduct",
    "ProductPage",
    "ProductRef",
    "ProductReview",
    "ProductReviews",
    "UploadResult",
]
