"""
app/schemas package marker.
"""

from app.schemas.review_import import (
    ImportResultResponse,
    MetafieldDefinitionResponse,
    ProductPageResponse,
    ProductReviewsResponse,
    ReviewCreateRequest,
    ReviewResponse,
    StatusResponse,
    StorefrontReviewRequest,
    UploadResultResponse,
)

__all__ = [
    "ImportResultResponse",
    "MetafieldDefinitionResponse",
    "ProductPageResponse",
    "ProductReviewsResponse",
    "ReviewCreateRequest",
    "ReviewResponse",
    "StatusResponse",
    "StorefrontReviewRequest",
    "UploadResultResponse",
]
