"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class ReviewImportSettings:
    """
    Runtime settings for CSV review import.
    """

    log_validation_errors: bool = True


@dataclass(frozen=True)
class ExternalHTTPSettings:
    """
    Shared HTTP behavior settings for the Admin API client.
    """

    timeout_seconds: float = 15.0
    max_retries: int = 3
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0
    rate_limit_per_second: float = 2.0


@dataclass(frozen=True)
class CORSSettings:
    """
    Browser origins allowed to call the API, e.g. the storefront review form.
    """

    allowed_origins: tuple[str, ...] = ()


@dataclass(frozen=True)
class ShopifyAdminSettings:
    """
    Admin GraphQL API connection settings.
    """

    shop_domain: str | None = None
    access_token: str | None = None
    api_version: str = "2024-01"

    @property
    def graphql_url(self) -> str:
        domain = (self.shop_domain or "").removeprefix("https://").removeprefix("http://").rstrip("/")
        return f"https://{domain}/admin/api/{self.api_version}/graphql.json"


@lru_cache(maxsize=1)
def get_review_import_settings() -> ReviewImportSettings:
    """
    Return cached review import settings from environment variables.
    """

    return ReviewImportSettings(
        log_validation_errors=_get_bool_env("REVIEW_IMPORT_LOG_VALIDATION_ERRORS", True),
    )


@lru_cache(maxsize=1)
def get_external_http_settings() -> ExternalHTTPSettings:
    """
    Return shared HTTP settings from environment variables.
    """

    return ExternalHTTPSettings(
        timeout_seconds=max(1.0, _get_float_env("EXTERNAL_HTTP_TIMEOUT_SECONDS", 15.0)),
        max_retries=max(0, _get_int_env("EXTERNAL_HTTP_MAX_RETRIES", 3)),
        backoff_initial_seconds=max(0.1, _get_float_env("EXTERNAL_HTTP_BACKOFF_INITIAL_SECONDS", 0.5)),
        backoff_multiplier=max(1.0, _get_float_env("EXTERNAL_HTTP_BACKOFF_MULTIPLIER", 2.0)),
        rate_limit_per_second=max(0.1, _get_float_env("EXTERNAL_HTTP_RATE_LIMIT_PER_SECOND", 2.0)),
    )


@lru_cache(maxsize=1)
def get_shopify_admin_settings() -> ShopifyAdminSettings:
    """
    Return Admin API connection settings from environment variables.
    """

    return ShopifyAdminSettings(
        shop_domain=_get_optional_str_env("SHOPIFY_SHOP_DOMAIN"),
        access_token=_get_optional_str_env("SHOPIFY_ADMIN_ACCESS_TOKEN"),
        api_version=_get_str_env("SHOPIFY_API_VERSION", "2024-01"),
    )


@lru_cache(maxsize=1)
def get_cors_settings() -> CORSSettings:
    """
    Return CORS settings from the comma-separated ``CORS_ALLOWED_ORIGINS``.
    """

    raw = _get_str_env("CORS_ALLOWED_ORIGINS", "")
    origins = tuple(origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip())
    return CORSSettings(allowed_origins=origins)
