"""
app/connectors package marker.
"""

from app.connectors.base import AdminAPIRequestError, BaseHTTPClient
from app.connectors.shopify_admin import ShopifyAdminClient

__all__ = [
    "AdminAPIRequestError",
    "BaseHTTPClient",
    "ShopifyAdminClient",
]
