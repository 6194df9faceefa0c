"""
app/services/review_csv_service.py

Service layer for CSV review import and export.

Import runs in two phases:

    1. parse_and_validate():  header check, per-row validation, group by handle
    2. upload_products():     append one review per grouped row to each product

Each handle is committed independently during upload: a failure for one handle
is recorded as a diagnostic and the next handle is still processed.
"""

from __future__ import annotations

import csv
import io
import logging
import uuid
from collections.abc import Callable, Iterable, Sequence
from functools import lru_cache

from app.config import get_review_import_settings
from app.domain.review_import import (
    IMPORT_STATUS_ERROR,
    IMPORT_STATUS_SUCCESS,
    CSVRow,
    ImportResult,
    ParsedProduct,
    ProductReview,
    UploadResult,
)
from app.logging_utils import log_event
from app.mappers.review_row_mapper import HeaderIndex, ReviewRowMapper, split_line
from app.repositories.product_review_repository import ProductReviewRepository
from app.validators.csv_validator import CSVRowValidator, parse_leading_int, validate_headers

logger = logging.getLogger(__name__)

LINE_SEPARATOR = "\n"
VALIDATION_ERROR_SUMMARY = "Validation errors in CSV file."
UPLOAD_ERROR_SUMMARY = "Upload Errors"
NO_PRODUCTS_MESSAGE = "No products to upload."
EXPORT_HEADER = "Name,Rating,Message\n"


# ---------------------------------------------------------------------------
# Grouping and serialization helpers
# ---------------------------------------------------------------------------


def group_rows_by_handle(rows: Iterable[CSVRow]) -> dict[str, list[CSVRow]]:
    """
    Group rows by handle, keeping first-occurrence handle order and file row order.
    """

    grouped: dict[str, list[CSVRow]] = {}
    for row in rows:
        grouped.setdefault(row.handle or "", []).append(row)
    return grouped


def summarize_products(grouped: dict[str, list[CSVRow]]) -> list[ParsedProduct]:
    """
    Build one preview summary per handle from the first row of its group.

    Later rows for the same handle are still committed as reviews, but do not
    appear in the summary.
    """

    products: list[ParsedProduct] = []
    for handle, rows in grouped.items():
        first = rows[0]
        products.append(
            ParsedProduct(
                handle=handle,
                name=first.name or "",
                message=first.message or "",
                rating=first.rating or "",
            )
        )
    return products


def build_reviews(
    rows: Sequence[CSVRow],
    *,
    id_factory: Callable[[], str] | None = None,
) -> list[ProductReview]:
    """
    Create one review with a fresh id for every validated row.
    """

    make_id = id_factory or (lambda: str(uuid.uuid4()))
    return [
        ProductReview(
            id=make_id(),
            name=row.name or "",
            message=row.message or "",
            rating=parse_leading_int(row.rating) or 0,
        )
        for row in rows
    ]


def convert_reviews_to_csv(reviews: Iterable[ProductReview]) -> str:
    """
    Serialize reviews as CSV text with every field quoted and inner quotes doubled.
    """

    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator=LINE_SEPARATOR)
    writer.writerows((review.name, review.rating, review.message) for review in reviews)
    body = buf.getvalue()
    # No terminator after the last row.
    if body.endswith(LINE_SEPARATOR):
        body = body[: -len(LINE_SEPARATOR)]
    return EXPORT_HEADER + body


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class ReviewCSVService:
    """
    Coordinates CSV parsing, validation, grouping, and review upload.
    """

    def __init__(
        self,
        *,
        log_validation_errors: bool,
        validator: CSVRowValidator | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._log_validation_errors = log_validation_errors
        self._validator = validator or CSVRowValidator()
        self._id_factory = id_factory

    def parse_and_validate(self, text: str) -> ImportResult:
        """
        Parse uploaded CSV text into grouped, validated rows.

        A missing required header stops parsing before any row is read.
        Invalid rows are dropped from the grouping but their diagnostics are
        all reported.
        """

        lines = text.split(LINE_SEPARATOR)
        # A terminating newline does not start another row.
        if len(lines) > 1 and lines[-1] == "":
            lines.pop()

        headers = split_line(lines[0])
        header_check = validate_headers(headers)
        if not header_check.is_valid:
            logger.info("CSV review import rejected: %s", header_check.message)
            return ImportResult(
                status=IMPORT_STATUS_ERROR,
                error=VALIDATION_ERROR_SUMMARY,
                details=[header_check.message or ""],
            )

        mapper = ReviewRowMapper(HeaderIndex.from_headers(headers))
        diagnostics: list[str] = []
        valid_rows: list[CSVRow] = []

        for row_number, line in enumerate(lines[1:], start=2):
            row = mapper.map_line(line, row_number=row_number)
            row_errors = self._validator.validate_row(row)
            if row_errors:
                diagnostics.extend(row_errors)
                if self._log_validation_errors:
                    logger.debug("Row %s is invalid: %s", row_number, row_errors)
                continue
            valid_rows.append(row)

        if diagnostics:
            logger.info(
                "CSV review import validation failed rows=%s valid_rows=%s errors=%s",
                len(lines) - 1,
                len(valid_rows),
                len(diagnostics),
            )
            return ImportResult(
                status=IMPORT_STATUS_ERROR,
                error=VALIDATION_ERROR_SUMMARY,
                details=diagnostics,
            )

        grouped = group_rows_by_handle(valid_rows)
        logger.info(
            "CSV review import validated rows=%s handles=%s",
            len(valid_rows),
            len(grouped),
        )
        return ImportResult(
            status=IMPORT_STATUS_SUCCESS,
            products=summarize_products(grouped),
            products_raw=grouped,
        )

    def upload_products(
        self,
        grouped: dict[str, list[CSVRow]],
        *,
        repository: ProductReviewRepository,
    ) -> UploadResult:
        """
        Append the grouped rows as reviews to each product, one handle at a time.
        """

        if not grouped:
            return UploadResult(
                status=IMPORT_STATUS_ERROR,
                error=UPLOAD_ERROR_SUMMARY,
                details=[NO_PRODUCTS_MESSAGE],
            )

        import_errors: list[str] = []
        import_results: list[str] = []

        for handle, rows in grouped.items():
            reviews_to_import = build_reviews(rows, id_factory=self._id_factory)
            try:
                current = repository.get_product_by_handle(handle)
                repository.update_product_reviews(
                    product_id=current.product.id,
                    metafield_id=current.metafield.id if current.metafield else None,
                    reviews=[*current.entries, *reviews_to_import],
                )
            except Exception as exc:  # noqa: BLE001
                logger.warning("Review upload failed handle=%r: %s", handle, exc)
                import_errors.append(f"Error updating product with handle '{handle}'")
                continue

            log_event(
                logger,
                logging.INFO,
                "reviews_imported",
                handle=handle,
                reviews_added=len(reviews_to_import),
                reviews_total=len(current.entries) + len(reviews_to_import),
            )
            import_results.append(f"Successfully imported reviews for '{handle}'")

        if import_errors:
            return UploadResult(
                status=IMPORT_STATUS_ERROR,
                error=UPLOAD_ERROR_SUMMARY,
                details=import_errors,
            )

        return UploadResult(status=IMPORT_STATUS_SUCCESS, details=import_results)


@lru_cache(maxsize=1)
def get_review_csv_service() -> ReviewCSVService:
    """
    Return cached review CSV service configured from runtime settings.
    """

    settings = get_review_import_settings()
    return ReviewCSVService(log_validation_errors=settings.log_validation_errors)
