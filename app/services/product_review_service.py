"""
app/services/product_review_service.py

Single-review operations on a product's reviews metafield.
"""

from __future__ import annotations

import logging
import uuid
from functools import lru_cache

from app.domain.review_import import (
    MetafieldDefinition,
    ProductPage,
    ProductReview,
    ProductReviews,
    entry_has_id,
)
from app.logging_utils import log_event
from app.repositories.product_review_repository import ProductReviewRepository, to_product_gid

logger = logging.getLogger(__name__)


class ReviewNotFoundError(LookupError):
    """
    Raised when a review id is not present on the product.
    """


class ProductReviewService:
    """
    Adds, removes, and lists reviews for one product at a time.
    """

    def list_reviews(self, *, handle: str, repository: ProductReviewRepository) -> ProductReviews:
        return repository.get_product_by_handle(handle)

    def list_products(
        self,
        *,
        first: int,
        after: str | None,
        repository: ProductReviewRepository,
    ) -> ProductPage:
        return repository.list_products(first=first, after=after)

    def get_metafield_definition(self, *, repository: ProductReviewRepository) -> MetafieldDefinition | None:
        return repository.get_metafield_definition()

    def ensure_metafield_definition(
        self,
        *,
        repository: ProductReviewRepository,
    ) -> tuple[MetafieldDefinition, bool]:
        """
        Return the reviews metafield definition, creating it when missing.

        The flag is ``True`` when the definition was created by this call.
        """

        existing = repository.get_metafield_definition()
        if existing is not None:
            return existing, False
        created = repository.create_metafield_definition()
        log_event(logger, logging.INFO, "metafield_definition_created", name=created.name)
        return created, True

    def add_review(
        self,
        *,
        handle: str,
        name: str,
        message: str,
        rating: int,
        repository: ProductReviewRepository,
    ) -> ProductReview:
        current = repository.get_product_by_handle(handle)
        return self._append(current, name=name, message=message, rating=rating, repository=repository)

    def submit_storefront_review(
        self,
        *,
        product_id: str | int,
        name: str,
        message: str,
        rating: int,
        repository: ProductReviewRepository,
    ) -> ProductReview:
        """
        Append a review submitted from the storefront, addressed by numeric product id.
        """

        current = repository.get_product_by_id(to_product_gid(product_id))
        return self._append(current, name=name, message=message, rating=rating, repository=repository)

    def delete_review(
        self,
        *,
        handle: str,
        review_id: str,
        repository: ProductReviewRepository,
    ) -> ProductReviews:
        current = repository.get_product_by_handle(handle)
        remaining = [entry for entry in current.entries if not entry_has_id(entry, review_id)]
        if len(remaining) == len(current.entries):
            raise ReviewNotFoundError(f"Review '{review_id}' not found for product '{handle}'.")

        repository.update_product_reviews(
            product_id=current.product.id,
            metafield_id=current.metafield.id if current.metafield else None,
            reviews=remaining,
        )
        log_event(logger, logging.INFO, "review_deleted", handle=handle, review_id=review_id)
        return ProductReviews.from_entries(current.product, current.metafield, remaining)

    def _append(
        self,
        current: ProductReviews,
        *,
        name: str,
        message: str,
        rating: int,
        repository: ProductReviewRepository,
    ) -> ProductReview:
        review = ProductReview(id=str(uuid.uuid4()), name=name, message=message, rating=rating)
        repository.update_product_reviews(
            product_id=current.product.id,
            metafield_id=current.metafield.id if current.metafield else None,
            reviews=[*current.entries, review],
        )
        log_event(
            logger,
            logging.INFO,
            "review_created",
            product_id=current.product.id,
            review_id=review.id,
        )
        return review


@lru_cache(maxsize=1)
def get_product_review_service() -> ProductReviewService:
    return ProductReviewService()
