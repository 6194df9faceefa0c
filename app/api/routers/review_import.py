"""
app/api/routers/review_import.py

CSV review import HTTP endpoints.

POST /import/validate  : parse and validate only, returns the grouped preview
POST /import           : parse, then append every grouped row as a review
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status

from app.api.dependencies import get_csv_upload, get_product_review_repository
from app.repositories.product_review_repository import ProductReviewRepository
from app.schemas.review_import import ImportResultResponse, UploadResultResponse
from app.services.review_csv_service import ReviewCSVService, get_review_csv_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/import", tags=["import"])


def _read_upload_text(file: UploadFile) -> str:
    try:
        raw = file.file.read()
    finally:
        file.file.close()
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="CSV must be UTF-8 encoded.",
        ) from exc


@router.post("/validate", response_model=ImportResultResponse)
def validate_csv(
    file: UploadFile = Depends(get_csv_upload),
    import_service: ReviewCSVService = Depends(get_review_csv_service),
) -> ImportResultResponse:
    """
    Validate one CSV file and return the per-handle preview.
    """

    result = import_service.parse_and_validate(_read_upload_text(file))
    return ImportResultResponse.from_result(result)


@router.post("", response_model=UploadResultResponse)
def import_csv(
    file: UploadFile = Depends(get_csv_upload),
    import_service: ReviewCSVService = Depends(get_review_csv_service),
    repository: ProductReviewRepository = Depends(get_product_review_repository),
) -> UploadResultResponse:
    """
    Validate one CSV file and import its reviews.

    Validation errors are returned unchanged and nothing is uploaded.
    """

    parsed = import_service.parse_and_validate(_read_upload_text(file))
    if not parsed.is_success:
        return UploadResultResponse(status=parsed.status, error=parsed.error, details=list(parsed.details))

    uploaded = import_service.upload_products(parsed.products_raw, repository=repository)
    if not uploaded.is_success:
        logger.warning("CSV review import finished with errors: %s", uploaded.details)
    return UploadResultResponse.from_result(uploaded)
