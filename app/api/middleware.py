"""
app/api/middleware.py

HTTP middleware shared by the API application.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import CORSSettings

logger = logging.getLogger(__name__)


def add_cors_middleware(application: FastAPI, settings: CORSSettings) -> None:
    """
    Allow the configured browser origins, such as the storefront review form.

    No origin is allowed when none is configured.
    """

    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    logger.info("CORS enabled origins=%s", list(settings.allowed_origins))
