"""
app/repositories/product_review_repository.py

Reads and replaces the reviews metafield of a product through the Admin API.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from app.connectors.base import AdminAPIRequestError
from app.connectors.product_queries import (
    GET_PRODUCT_BY_HANDLE_QUERY,
    GET_PRODUCT_BY_ID_QUERY,
    LIST_PRODUCTS_QUERY,
    METAFIELD_DEFINITION_MUTATION,
    METAFIELD_DEFINITION_QUERY,
    PRODUCT_METAFIELD_MUTATION,
    REVIEWS_METAFIELD_KEY,
    REVIEWS_METAFIELD_NAMESPACE,
    REVIEWS_METAFIELD_TYPE,
)
from app.connectors.shopify_admin import ShopifyAdminClient
from app.domain.review_import import (
    MetafieldDefinition,
    MetafieldRef,
    ProductPage,
    ProductRef,
    ProductReview,
    ProductReviews,
    to_metafield_entry,
)

logger = logging.getLogger(__name__)

PRODUCT_GID_PREFIX = "gid://shopify/Product/"
DEFAULT_PAGE_SIZE = 10


class ProductNotFoundError(LookupError):
    """
    Raised when no product exists for a handle or id.
    """


def to_product_gid(product_id: str | int) -> str:
    """
    Convert a numeric storefront product id into an Admin API global id.
    """

    raw = str(product_id).strip()
    if raw.startswith(PRODUCT_GID_PREFIX):
        return raw
    return f"{PRODUCT_GID_PREFIX}{raw}"


class ProductReviewRepository:
    """
    Repository for product review lists stored in a JSON metafield.
    """

    def __init__(self, client: ShopifyAdminClient) -> None:
        self._client = client

    def get_product_by_handle(self, handle: str) -> ProductReviews:
        data = self._client.graphql(GET_PRODUCT_BY_HANDLE_QUERY, {"handle": handle})
        node = data.get("productByHandle")
        if not node:
            raise ProductNotFoundError(f"No product with handle '{handle}'.")
        return self._to_product_reviews(node)

    def get_product_by_id(self, product_id: str) -> ProductReviews:
        data = self._client.graphql(GET_PRODUCT_BY_ID_QUERY, {"id": product_id})
        node = data.get("product")
        if not node:
            raise ProductNotFoundError(f"No product with id '{product_id}'.")
        return self._to_product_reviews(node)

    def list_products(self, *, first: int = DEFAULT_PAGE_SIZE, after: str | None = None) -> ProductPage:
        """
        Return one forward page of products with their decoded review lists.
        """

        data = self._client.graphql(LIST_PRODUCTS_QUERY, {"first": first, "after": after})
        connection = data.get("products") or {}
        page_info = connection.get("pageInfo") or {}
        return ProductPage(
            products=[
                self._to_product_reviews(edge["node"])
                for edge in connection.get("edges") or []
                if edge.get("node")
            ],
            end_cursor=page_info.get("endCursor"),
            has_next_page=bool(page_info.get("hasNextPage")),
        )

    def get_metafield_definition(self) -> MetafieldDefinition | None:
        data = self._client.graphql(METAFIELD_DEFINITION_QUERY)
        edges = (data.get("metafieldDefinitions") or {}).get("edges") or []
        if not edges:
            return None
        return _to_definition(edges[0].get("node") or {})

    def create_metafield_definition(self) -> MetafieldDefinition:
        """
        Register the JSON reviews metafield definition on products.
        """

        data = self._client.graphql(METAFIELD_DEFINITION_MUTATION)
        payload = data.get("metafieldDefinitionCreate") or {}
        _raise_on_user_errors("metafieldDefinitionCreate", payload.get("userErrors"))
        created = payload.get("createdDefinition")
        if not created:
            raise AdminAPIRequestError("metafieldDefinitionCreate returned no definition.")
        logger.info("Reviews metafield definition created name=%s", created.get("name"))
        return _to_definition(created)

    def update_product_reviews(
        self,
        *,
        product_id: str,
        metafield_id: str | None,
        reviews: Sequence[ProductReview | Any],
    ) -> None:
        """
        Replace the full review list of a product.

        Items that are not ``ProductReview`` objects are stored exactly as
        given. Creates the metafield when the product does not have one yet.
        """

        value = json.dumps([to_metafield_entry(item) for item in reviews])
        if metafield_id:
            metafield: dict[str, Any] = {"id": metafield_id, "value": value}
        else:
            metafield = {
                "namespace": REVIEWS_METAFIELD_NAMESPACE,
                "key": REVIEWS_METAFIELD_KEY,
                "value": value,
                "type": REVIEWS_METAFIELD_TYPE,
            }

        data = self._client.graphql(
            PRODUCT_METAFIELD_MUTATION,
            {"input": {"id": product_id, "metafields": [metafield]}},
        )
        try:
            _raise_on_user_errors("productUpdate", (data.get("productUpdate") or {}).get("userErrors"))
        except AdminAPIRequestError:
            logger.error("Product review update rejected product_id=%s", product_id)
            raise

    @staticmethod
    def _to_product_reviews(node: dict[str, Any]) -> ProductReviews:
        metafield_node = node.get("metafield")
        metafield = None
        entries: list[Any] = []
        if metafield_node:
            metafield = MetafieldRef(
                id=str(metafield_node.get("id", "")),
                namespace=str(metafield_node.get("namespace", REVIEWS_METAFIELD_NAMESPACE)),
                key=str(metafield_node.get("key", REVIEWS_METAFIELD_KEY)),
                value=metafield_node.get("value"),
            )
            entries = _decode_entries(metafield.value)

        return ProductReviews.from_entries(
            ProductRef(
                id=str(node.get("id", "")),
                handle=node.get("handle"),
                title=node.get("title"),
            ),
            metafield,
            entries,
        )


def _decode_entries(value: str | None) -> list[Any]:
    if not value:
        return []
    try:
        payload = json.loads(value)
    except json.JSONDecodeError as exc:
        raise AdminAPIRequestError("Reviews metafield does not contain valid JSON.") from exc
    if not isinstance(payload, list):
        raise AdminAPIRequestError("Reviews metafield must hold a JSON list.")
    return payload


def _to_definition(node: dict[str, Any]) -> MetafieldDefinition:
    return MetafieldDefinition(
        name=str(node.get("name", "")),
        type_name=(node.get("type") or {}).get("name"),
    )


def _raise_on_user_errors(operation: str, user_errors: list[dict[str, Any]] | None) -> None:
    if not user_errors:
        return
    messages = [str(error.get("message", "")) for error in user_errors]
    logger.error("%s rejected errors=%s", operation, messages)
    raise AdminAPIRequestError(f"{operation} rejected: {'; '.join(messages)}")
