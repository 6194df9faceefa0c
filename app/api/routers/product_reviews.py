"""
app/api/routers/product_reviews.py

Per-product review endpoints.

GET    /products                                product overview (first/after cursor)
GET    /products/{handle}/reviews               current review list
POST   /products/{handle}/reviews               append one review
DELETE /products/{handle}/reviews/{review_id}   remove one review
GET    /products/{handle}/reviews.csv           CSV export (attachment)
POST   /api/reviews                             storefront submission by product id
GET    /metafield-definition                    reviews metafield definition status
POST   /metafield-definition                    create the definition when missing

All review logic lives in the services; the router maps domain errors to
HTTP status codes.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.dependencies import get_product_review_repository
from app.connectors.base import AdminAPIRequestError
from app.repositories.product_review_repository import (
    DEFAULT_PAGE_SIZE,
    ProductNotFoundError,
    ProductReviewRepository,
)
from app.schemas.review_import import (
    MetafieldDefinitionResponse,
    ProductPageResponse,
    ProductReviewsResponse,
    ReviewCreateRequest,
    ReviewResponse,
    StatusResponse,
    StorefrontReviewRequest,
)
from app.services.product_review_service import (
    ProductReviewService,
    ReviewNotFoundError,
    get_product_review_service,
)
from app.services.review_csv_service import convert_reviews_to_csv

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reviews"])

EXPORT_FILENAME = "reviews.csv"
MAX_PAGE_SIZE = 250


@router.get("/products", response_model=ProductPageResponse)
def list_products(
    first: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    after: str | None = Query(default=None),
    repository: ProductReviewRepository = Depends(get_product_review_repository),
    review_service: ProductReviewService = Depends(get_product_review_service),
) -> ProductPageResponse:
    """
    List products with their decoded review lists, one page at a time.
    """

    try:
        page = review_service.list_products(first=first, after=after, repository=repository)
    except AdminAPIRequestError as exc:
        logger.error("Failed to list products after=%r: %s", after, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Error fetching products",
        ) from exc
    return ProductPageResponse.from_page(page)


@router.get("/products/{handle}/reviews.csv")
def export_reviews_csv(
    handle: str,
    repository: ProductReviewRepository = Depends(get_product_review_repository),
) -> Response:
    """
    Download a product's reviews as CSV.
    """

    try:
        current = repository.get_product_by_handle(handle)
    except (ProductNotFoundError, AdminAPIRequestError) as exc:
        logger.warning("Review export failed handle=%r: %s", handle, exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unable to export reviews for '{handle}'.",
        ) from exc

    return Response(
        content=convert_reviews_to_csv(current.reviews),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
    )


@router.get("/products/{handle}/reviews", response_model=ProductReviewsResponse)
def list_reviews(
    handle: str,
    repository: ProductReviewRepository = Depends(get_product_review_repository),
    review_service: ProductReviewService = Depends(get_product_review_service),
) -> ProductReviewsResponse:
    try:
        current = review_service.list_reviews(handle=handle, repository=repository)
    except ProductNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except AdminAPIRequestError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return ProductReviewsResponse.from_product_reviews(current)


@router.post(
    "/products/{handle}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_review(
    handle: str,
    payload: ReviewCreateRequest,
    repository: ProductReviewRepository = Depends(get_product_review_repository),
    review_service: ProductReviewService = Depends(get_product_review_service),
) -> ReviewResponse:
    try:
        review = review_service.add_review(
            handle=handle,
            name=payload.name,
            message=payload.message,
            rating=payload.rating,
            repository=repository,
        )
    except ProductNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except AdminAPIRequestError as exc:
        logger.error("Failed to create review handle=%r: %s", handle, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to create review",
        ) from exc
    return ReviewResponse.from_review(review)


@router.delete("/products/{handle}/reviews/{review_id}", response_model=ProductReviewsResponse)
def delete_review(
    handle: str,
    review_id: str,
    repository: ProductReviewRepository = Depends(get_product_review_repository),
    review_service: ProductReviewService = Depends(get_product_review_service),
) -> ProductReviewsResponse:
    try:
        remaining = review_service.delete_review(
            handle=handle,
            review_id=review_id,
            repository=repository,
        )
    except (ProductNotFoundError, ReviewNotFoundError) as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except AdminAPIRequestError as exc:
        logger.error("Failed to delete review handle=%r review_id=%r: %s", handle, review_id, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to delete review",
        ) from exc
    return ProductReviewsResponse.from_product_reviews(remaining)


@router.post("/api/reviews", response_model=StatusResponse)
def submit_storefront_review(
    payload: StorefrontReviewRequest,
    repository: ProductReviewRepository = Depends(get_product_review_repository),
    review_service: ProductReviewService = Depends(get_product_review_service),
) -> StatusResponse:
    """
    Accept a review from the storefront; failures are reported as ``status: error``.
    """

    try:
        review_service.submit_storefront_review(
            product_id=payload.product_id,
            name=payload.name,
            message=payload.message,
            rating=payload.rating,
            repository=repository,
        )
    except (ProductNotFoundError, AdminAPIRequestError) as exc:
        logger.warning("Storefront review rejected product_id=%r: %s", payload.product_id, exc)
        return StatusResponse(status="error")
    return StatusResponse(status="success")


@router.get("/metafield-definition", response_model=MetafieldDefinitionResponse)
def get_metafield_definition(
    repository: ProductReviewRepository = Depends(get_product_review_repository),
    review_service: ProductReviewService = Depends(get_product_review_service),
) -> MetafieldDefinitionResponse:
    try:
        definition = review_service.get_metafield_definition(repository=repository)
    except AdminAPIRequestError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return MetafieldDefinitionResponse.from_definition(definition)


@router.post("/metafield-definition", response_model=MetafieldDefinitionResponse)
def create_metafield_definition(
    repository: ProductReviewRepository = Depends(get_product_review_repository),
    review_service: ProductReviewService = Depends(get_product_review_service),
) -> MetafieldDefinitionResponse:
    """
    Create the reviews metafield definition; an existing one is returned unchanged.
    """

    try:
        definition, created = review_service.ensure_metafield_definition(repository=repository)
    except AdminAPIRequestError as exc:
        logger.error("Failed to create reviews metafield definition: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to create metafield definition",
        ) from exc
    return MetafieldDefinitionResponse.from_definition(definition, created=created)
