"""
app/api/routers package marker.
"""

from app.api.routers.product_reviews import router as product_reviews_router
from app.api.routers.review_import import router as review_import_router

__all__ = [
    "product_reviews_router",
    "review_import_router",
]
