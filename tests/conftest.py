from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest

from app.domain.review_import import (
    MetafieldDefinition,
    MetafieldRef,
    ProductPage,
    ProductRef,
    ProductReview,
    ProductReviews,
    to_metafield_entry,
)
from app.repositories.product_review_repository import ProductNotFoundError


class FakeProductReviewRepository:
    """
    In-memory stand-in for ProductReviewRepository.

    ``updates`` records the JSON-ready entries each write would store.
    """

    def __init__(self) -> None:
        self.products: dict[str, ProductReviews] = {}
        self.failing_handles: set[str] = set()
        self.calls: list[tuple[str, str]] = []
        self.updates: list[dict[str, object]] = []
        self.definition: MetafieldDefinition | None = None

    def add_product(
        self,
        handle: str,
        *,
        reviews: Sequence[ProductReview] = (),
        entries: Sequence[Any] | None = None,
        with_metafield: bool = True,
    ) -> None:
        product_id = f"gid://shopify/Product/{len(self.products) + 1}"
        metafield = (
            MetafieldRef(id=f"gid://shopify/Metafield/{handle}", namespace="hydrogen_reviews", key="product_reviews")
            if with_metafield
            else None
        )
        stored = list(entries) if entries is not None else [review.to_dict() for review in reviews]
        self.products[handle] = ProductReviews.from_entries(
            ProductRef(id=product_id, handle=handle, title=handle.title()),
            metafield,
            stored,
        )

    def get_product_by_handle(self, handle: str) -> ProductReviews:
        self.calls.append(("get_product_by_handle", handle))
        if handle in self.failing_handles:
            raise RuntimeError(f"Admin API unavailable for {handle}")
        if handle not in self.products:
            raise ProductNotFoundError(f"No product with handle '{handle}'.")
        return self.products[handle]

    def get_product_by_id(self, product_id: str) -> ProductReviews:
        self.calls.append(("get_product_by_id", product_id))
        for current in self.products.values():
            if current.product.id == product_id:
                return current
        raise ProductNotFoundError(f"No product with id '{product_id}'.")

    def list_products(self, *, first: int = 10, after: str | None = None) -> ProductPage:
        self.calls.append(("list_products", f"first={first} after={after}"))
        handles = list(self.products)
        start = handles.index(after) + 1 if after in self.products else 0
        page = handles[start : start + first]
        return ProductPage(
            products=[self.products[handle] for handle in page],
            end_cursor=page[-1] if page else None,
            has_next_page=start + first < len(handles),
        )

    def get_metafield_definition(self) -> MetafieldDefinition | None:
        self.calls.append(("get_metafield_definition", ""))
        return self.definition

    def create_metafield_definition(self) -> MetafieldDefinition:
        self.calls.append(("create_metafield_definition", ""))
        self.definition = MetafieldDefinition(name="Product Reviews", type_name="json")
        return self.definition

    def update_product_reviews(
        self,
        *,
        product_id: str,
        metafield_id: str | None,
        reviews: Sequence[ProductReview | Any],
    ) -> None:
        self.calls.append(("update_product_reviews", product_id))
        stored = [to_metafield_entry(item) for item in reviews]
        self.updates.append({"product_id": product_id, "metafield_id": metafield_id, "reviews": stored})
        for handle, current in self.products.items():
            if current.product.id == product_id:
                self.products[handle] = ProductReviews.from_entries(current.product, current.metafield, stored)


@pytest.fixture()
def fake_repository() -> FakeProductReviewRepository:
    return FakeProductReviewRepository()
