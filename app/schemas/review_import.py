"""
app/schemas/review_import.py

Request and response schemas for review import, export, and management endpoints.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from app.domain.review_import import (
    CSVRow,
    ImportResult,
    MetafieldDefinition,
    ProductPage,
    ProductReview,
    ProductReviews,
    UploadResult,
)
from app.validators.csv_validator import MAX_MESSAGE_LENGTH, MAX_RATING, MIN_RATING


class ParsedProductResponse(BaseModel):
    """
    Preview summary for one product handle.
    """

    handle: str
    name: str
    message: str
    rating: str


class CSVRowResponse(BaseModel):
    """
    One validated CSV row as grouped under its handle.
    """

    handle: str
    name: str
    message: str
    rating: str


class ImportResultResponse(BaseModel):
    """
    API response model for the CSV parse phase.
    """

    status: Literal["success", "error"]
    error: str | None = None
    details: list[str] = Field(default_factory=list)
    products: list[ParsedProductResponse] = Field(default_factory=list)
    products_raw: dict[str, list[CSVRowResponse]] = Field(default_factory=dict)

    @classmethod
    def from_result(cls, result: ImportResult) -> ImportResultResponse:
        return cls(
            status=result.status,
            error=result.error,
            details=list(result.details),
            products=[
                ParsedProductResponse(
                    handle=product.handle,
                    name=product.name,
                    message=product.message,
                    rating=product.rating,
                )
                for product in result.products
            ],
            products_raw={
                handle: [_row_response(row) for row in rows]
                for handle, rows in result.products_raw.items()
            },
        )


class UploadResultResponse(BaseModel):
    """
    API response model for the commit phase.
    """

    status: Literal["success", "error"]
    error: str | None = None
    details: list[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: UploadResult) -> UploadResultResponse:
        return cls(status=result.status, error=result.error, details=list(result.details))


class ReviewResponse(BaseModel):
    id: str
    name: str
    message: str
    rating: int

    @classmethod
    def from_review(cls, review: ProductReview) -> ReviewResponse:
        return cls(id=review.id, name=review.name, message=review.message, rating=review.rating)


class ProductReviewsResponse(BaseModel):
    """
    A product's identity and its current review list.
    """

    product_id: str
    handle: str | None = None
    title: str | None = None
    reviews: list[ReviewResponse] = Field(default_factory=list)

    @classmethod
    def from_product_reviews(cls, product_reviews: ProductReviews) -> ProductReviewsResponse:
        return cls(
            product_id=product_reviews.product.id,
            handle=product_reviews.product.handle,
            title=product_reviews.product.title,
            reviews=[ReviewResponse.from_review(review) for review in product_reviews.reviews],
        )


class ProductPageResponse(BaseModel):
    """
    One page of products with their reviews and the cursor for the next page.
    """

    products: list[ProductReviewsResponse] = Field(default_factory=list)
    end_cursor: str | None = None
    has_next_page: bool = False

    @classmethod
    def from_page(cls, page: ProductPage) -> ProductPageResponse:
        return cls(
            products=[ProductReviewsResponse.from_product_reviews(product) for product in page.products],
            end_cursor=page.end_cursor,
            has_next_page=page.has_next_page,
        )


class MetafieldDefinitionResponse(BaseModel):
    exists: bool
    created: bool = False
    name: str | None = None
    type_name: str | None = None

    @classmethod
    def from_definition(
        cls,
        definition: MetafieldDefinition | None,
        *,
        created: bool = False,
    ) -> MetafieldDefinitionResponse:
        if definition is None:
            return cls(exists=False)
        return cls(exists=True, created=created, name=definition.name, type_name=definition.type_name)


class ReviewCreateRequest(BaseModel):
    """
    Admin request body for adding one review.
    """

    name: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH)
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)


class StorefrontReviewRequest(ReviewCreateRequest):
    """
    Storefront request body; the product is addressed by its numeric id.
    """

    product_id: int | str = Field(..., alias="productId")


class StatusResponse(BaseModel):
    status: Literal["success", "error"]


def _row_response(row: CSVRow) -> CSVRowResponse:
    return CSVRowResponse(
        handle=row.handle or "",
        name=row.name or "",
        message=row.message or "",
        rating=row.rating or "",
    )
