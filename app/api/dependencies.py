"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation and Admin API access.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import File, HTTPException, UploadFile, status

from app.config import get_external_http_settings, get_shopify_admin_settings
from app.connectors.shopify_admin import ShopifyAdminClient
from app.repositories.product_review_repository import ProductReviewRepository

CSV_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
}


def get_csv_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the uploaded file is a CSV by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").split(";", 1)[0].strip().lower()

    is_csv_filename = filename.endswith(".csv")
    is_csv_content_type = content_type in CSV_CONTENT_TYPES

    if not is_csv_filename and not is_csv_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type.",
        )

    return file


@lru_cache(maxsize=1)
def get_shopify_admin_client() -> ShopifyAdminClient:
    """
    Return the process-wide Admin API client.
    """

    return ShopifyAdminClient(
        settings=get_shopify_admin_settings(),
        http_settings=get_external_http_settings(),
    )


def get_product_review_repository() -> ProductReviewRepository:
    return ProductReviewRepository(get_shopify_admin_client())
