from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI


def _validate_env() -> None:
    """
    Validate all required environment variables at startup.

    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.
    """

    from app.config import load_env_files

    load_env_files()

    errors: list[str] = []

    if not os.getenv("SHOPIFY_SHOP_DOMAIN", "").strip():
        errors.append("SHOPIFY_SHOP_DOMAIN is not set (e.g. my-store.myshopify.com).")

    if not os.getenv("SHOPIFY_ADMIN_ACCESS_TOKEN", "").strip():
        errors.append(
            "SHOPIFY_ADMIN_ACCESS_TOKEN is not set. Empty strings are not permitted."
        )

    if errors:
        raise RuntimeError(
            "Startup validation failed: missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Close the shared Admin API session on shutdown."""
    from app.api.dependencies import get_shopify_admin_client

    logging.getLogger(__name__).info("Review manager started")
    try:
        yield
    finally:
        if get_shopify_admin_client.cache_info().currsize:
            get_shopify_admin_client().close()
        logging.getLogger(__name__).info("Admin API session closed")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Storefront Review Manager API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.middleware import add_cors_middleware
    from app.api.routers import product_reviews_router, review_import_router
    from app.config import get_cors_settings

    add_cors_middleware(application, get_cors_settings())
    application.include_router(review_import_router)
    application.include_router(product_reviews_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
