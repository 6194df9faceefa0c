"""
tests/test_review_csv_service.py

Pytest unit tests for ReviewCSVService and the CSV helpers.

No network: the product repository is an in-memory fake.

Coverage
--------
- Header short-circuit
- Row diagnostics accumulate across rows and fields
- Grouping by handle and first-row-wins summaries
- Upload: empty grouping, per-handle failure isolation, review construction
- Export serialization and quoting
"""

from __future__ import annotations

import itertools
import json

import pytest

from app.domain.review_import import CSVRow, ProductReview
from app.services.review_csv_service import (
    ReviewCSVService,
    build_reviews,
    convert_reviews_to_csv,
    group_rows_by_handle,
    summarize_products,
)

SAMPLE_CSV = (
    "handle,name,message,rating\n"
    "red-shoe,Alice,Nice shoes,5\n"
    "red-shoe,Bob,Too tight,2\n"
    "blue-hat,Cara,Great hat,4"
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def svc() -> ReviewCSVService:
    counter = itertools.count(1)
    return ReviewCSVService(
        log_validation_errors=True,
        id_factory=lambda: f"review-{next(counter)}",
    )


# ---------------------------------------------------------------------------
# Parse and validate
# ---------------------------------------------------------------------------


class TestParseAndValidate:
    def test_end_to_end_groups_rows_by_handle(self, svc: ReviewCSVService) -> None:
        result = svc.parse_and_validate(SAMPLE_CSV)

        assert result.status == "success"
        assert list(result.products_raw) == ["red-shoe", "blue-hat"]
        assert len(result.products_raw["red-shoe"]) == 2
        assert len(result.products_raw["blue-hat"]) == 1

        summary = result.products[0]
        assert summary.handle == "red-shoe"
        assert (summary.name, summary.message, summary.rating) == ("Alice", "Nice shoes", "5")

    def test_missing_header_skips_row_processing(self, svc: ReviewCSVService) -> None:
        text = "handle,name,rating\nBAD,,,\n"

        result = svc.parse_and_validate(text)

        assert result.status == "error"
        assert result.error == "Validation errors in CSV file."
        assert result.details == ["Missing headers: message"]
        assert result.products_raw == {}

    def test_columns_are_read_by_header_position(self, svc: ReviewCSVService) -> None:
        text = "rating,extra,message,handle,name\n4,ignored,Fits well,red-shoe,Dana"

        result = svc.parse_and_validate(text)

        assert result.status == "success"
        row = result.products_raw["red-shoe"][0]
        assert (row.name, row.message, row.rating) == ("Dana", "Fits well", "4")

    def test_row_errors_use_file_line_numbers(self, svc: ReviewCSVService) -> None:
        text = (
            "handle,name,message,rating\n"
            "red-shoe,Alice,Nice,5\n"
            "Red-Shoe,Bob,Tight,9\n"
            "blue-hat,,Great hat,4"
        )

        result = svc.parse_and_validate(text)

        assert result.status == "error"
        assert result.details == [
            "Row 3: Invalid 'Handle' (should be dash-separated, received 'Red-Shoe').",
            "Row 3: 'Rating' should be a number between 1 and 5 (received '9').",
            "Row 4: 'Name' is missing or empty.",
        ]

    def test_trailing_newline_does_not_add_a_row(self, svc: ReviewCSVService) -> None:
        result = svc.parse_and_validate(SAMPLE_CSV + "\n")

        assert result.status == "success"
        assert sum(len(rows) for rows in result.products_raw.values()) == 3

    def test_blank_interior_line_is_an_invalid_row(self, svc: ReviewCSVService) -> None:
        text = "handle,name,message,rating\n\nred-shoe,Alice,Nice,5"

        result = svc.parse_and_validate(text)

        assert result.status == "error"
        assert len(result.details) == 4
        assert all(detail.startswith("Row 2:") for detail in result.details)

    def test_embedded_comma_shifts_fields(self, svc: ReviewCSVService) -> None:
        text = 'handle,name,message,rating\nred-shoe,Alice,"Nice, really",5'

        result = svc.parse_and_validate(text)

        assert result.status == "error"
        assert "Row 2: 'Rating' should be a number between 1 and 5 (received ' really\"')." in result.details

    def test_crlf_is_not_normalized(self, svc: ReviewCSVService) -> None:
        result = svc.parse_and_validate("handle,name,message,rating\r\nred-shoe,Alice,Nice,5\r\n")

        assert result.details == ["Missing headers: rating"]

    def test_empty_file_reports_all_headers_missing(self, svc: ReviewCSVService) -> None:
        result = svc.parse_and_validate("")

        assert result.details == ["Missing headers: handle, name, message, rating"]

    def test_header_only_file_has_no_products(self, svc: ReviewCSVService) -> None:
        result = svc.parse_and_validate("handle,name,message,rating\n")

        assert result.status == "success"
        assert result.products == []
        assert result.products_raw == {}


# ---------------------------------------------------------------------------
# Grouping helpers
# ---------------------------------------------------------------------------


class TestGrouping:
    def test_first_row_wins_summary(self) -> None:
        rows = [
            CSVRow(row_number=2, handle="a", name="N1", message="M1", rating="5"),
            CSVRow(row_number=3, handle="a", name="N2", message="M2", rating="1"),
            CSVRow(row_number=4, handle="b", name="N3", message="M3", rating="3"),
        ]

        grouped = group_rows_by_handle(rows)
        products = summarize_products(grouped)

        assert list(grouped) == ["a", "b"]
        assert [row.name for row in grouped["a"]] == ["N1", "N2"]
        assert len(grouped["b"]) == 1
        assert products[0].name == "N1"
        assert products[0].rating == "5"

    def test_build_reviews_truncates_rating(self) -> None:
        rows = [CSVRow(row_number=2, handle="a", name="N", message="M", rating="3.9")]

        reviews = build_reviews(rows, id_factory=lambda: "fixed")

        assert reviews == [ProductReview(id="fixed", name="N", message="M", rating=3)]

    def test_build_reviews_generates_unique_ids(self) -> None:
        rows = [
            CSVRow(row_number=n, handle="a", name="N", message="M", rating="4")
            for n in range(2, 6)
        ]

        ids = {review.id for review in build_reviews(rows)}

        assert len(ids) == 4


# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------


class TestUploadProducts:
    def test_empty_grouping_makes_no_calls(self, svc: ReviewCSVService, fake_repository) -> None:
        result = svc.upload_products({}, repository=fake_repository)

        assert result.status == "error"
        assert result.error == "Upload Errors"
        assert result.details == ["No products to upload."]
        assert fake_repository.calls == []

    def test_appends_one_review_per_row(self, svc: ReviewCSVService, fake_repository) -> None:
        existing = ProductReview(id="old", name="Zed", message="Old review", rating=3)
        fake_repository.add_product("red-shoe", reviews=[existing])
        fake_repository.add_product("blue-hat", with_metafield=False)
        parsed = svc.parse_and_validate(SAMPLE_CSV)

        result = svc.upload_products(parsed.products_raw, repository=fake_repository)

        assert result.status == "success"
        assert result.details == [
            "Successfully imported reviews for 'red-shoe'",
            "Successfully imported reviews for 'blue-hat'",
        ]
        red = fake_repository.products["red-shoe"].reviews
        assert [review.name for review in red] == ["Zed", "Alice", "Bob"]
        assert [review.rating for review in red] == [3, 5, 2]
        blue_update = fake_repository.updates[1]
        assert blue_update["metafield_id"] is None
        assert len(blue_update["reviews"]) == 1

    def test_existing_entries_are_written_back_unchanged(
        self, svc: ReviewCSVService, fake_repository
    ) -> None:
        legacy = {
            "id": "a",
            "name": "Zed",
            "message": "Old review",
            "rating": "4.5",
            "date": "2024-01-01",
        }
        fake_repository.add_product("red-shoe", entries=[legacy, "stray"])
        grouped = {
            "red-shoe": [CSVRow(row_number=2, handle="red-shoe", name="Alice", message="Nice", rating="5")],
        }

        result = svc.upload_products(grouped, repository=fake_repository)

        assert result.status == "success"
        written = fake_repository.updates[0]["reviews"]
        assert written[0] == legacy
        assert json.dumps(written[0]) == json.dumps(legacy)
        assert written[1] == "stray"
        assert written[2]["name"] == "Alice"
        assert written[2]["rating"] == 5

    def test_failures_are_isolated_per_handle(self, svc: ReviewCSVService, fake_repository) -> None:
        fake_repository.add_product("blue-hat")
        fake_repository.add_product("green-sock")
        fake_repository.failing_handles.add("blue-hat")
        grouped = {
            "red-shoe": [CSVRow(row_number=2, handle="red-shoe", name="A", message="M", rating="5")],
            "blue-hat": [CSVRow(row_number=3, handle="blue-hat", name="B", message="M", rating="4")],
            "green-sock": [CSVRow(row_number=4, handle="green-sock", name="C", message="M", rating="3")],
        }

        result = svc.upload_products(grouped, repository=fake_repository)

        assert result.status == "error"
        assert result.details == [
            "Error updating product with handle 'red-shoe'",
            "Error updating product with handle 'blue-hat'",
        ]
        assert len(fake_repository.products["green-sock"].reviews) == 1


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


class TestConvertReviewsToCSV:
    def test_quotes_every_field_and_doubles_inner_quotes(self) -> None:
        review = ProductReview(id="1", name='Bob "B" Smith', message='Great "product"!', rating=5)

        text = convert_reviews_to_csv([review])

        assert text == 'Name,Rating,Message\n"Bob ""B"" Smith","5","Great ""product""!"'

    def test_rows_joined_without_trailing_newline(self) -> None:
        reviews = [
            ProductReview(id="1", name="A", message="one", rating=4),
            ProductReview(id="2", name="B", message="two", rating=1),
        ]

        text = convert_reviews_to_csv(reviews)

        assert text.split("\n") == ["Name,Rating,Message", '"A","4","one"', '"B","1","two"']

    def test_commas_and_newlines_stay_inside_quotes(self) -> None:
        review = ProductReview(id="1", name="Ann, B.", message="line one\nline two", rating=3)

        text = convert_reviews_to_csv([review])

        assert text == 'Name,Rating,Message\n"Ann, B.","3","line one\nline two"'

    def test_empty_review_list_is_header_only(self) -> None:
        assert convert_reviews_to_csv([]) == "Name,Rating,Message\n"
