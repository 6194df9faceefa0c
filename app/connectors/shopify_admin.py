"""
app/connectors/shopify_admin.py

Admin GraphQL API client.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from app.config import ExternalHTTPSettings, ShopifyAdminSettings
from app.connectors.base import AdminAPIRequestError, BaseHTTPClient

logger = logging.getLogger(__name__)

ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"


class ShopifyAdminClient(BaseHTTPClient):
    """
    Executes GraphQL documents against the store's Admin API.
    """

    def __init__(
        self,
        *,
        settings: ShopifyAdminSettings,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(source="shopify_admin", http_settings=http_settings, session=session)
        self._settings = settings

    def graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Run one GraphQL operation and return its ``data`` object.

        Top-level GraphQL ``errors`` are raised as ``AdminAPIRequestError``.
        """

        if not self._settings.shop_domain or not self._settings.access_token:
            raise AdminAPIRequestError(
                "Admin API is not configured. Set SHOPIFY_SHOP_DOMAIN and SHOPIFY_ADMIN_ACCESS_TOKEN."
            )

        payload = self._request_json(
            method="POST",
            url=self._settings.graphql_url,
            json_body={"query": query, "variables": variables or {}},
            headers={
                ACCESS_TOKEN_HEADER: self._settings.access_token,
                "Content-Type": "application/json",
            },
        )

        if not isinstance(payload, dict):
            raise AdminAPIRequestError(f"{self.source}: unexpected GraphQL response shape.")

        errors = payload.get("errors")
        if errors:
            messages = [
                str(error.get("message", error)) if isinstance(error, dict) else str(error)
                for error in errors
            ]
            logger.error("GraphQL errors source=%s errors=%s", self.source, messages)
            raise AdminAPIRequestError(f"{self.source}: GraphQL errors: {'; '.join(messages)}")

        data = payload.get("data")
        if not isinstance(data, dict):
            raise AdminAPIRequestError(f"{self.source}: GraphQL response has no data.")
        return data
