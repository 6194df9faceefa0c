from __future__ import annotations

import unittest

from app.domain.review_import import CSVRow
from app.validators.csv_validator import CSVRowValidator, parse_leading_int, validate_headers


def _row(**overrides: str | None) -> CSVRow:
    values: dict[str, str | None] = {
        "handle": "red-shoe",
        "name": "Alice",
        "message": "Nice shoes",
        "rating": "5",
    }
    values.update(overrides)
    return CSVRow(row_number=2, **values)


class TestHeaderValidation(unittest.TestCase):
    def test_accepts_required_headers_in_any_order_with_extras(self) -> None:
        result = validate_headers(["rating", "extra", "message", "name", "handle"])

        self.assertTrue(result.is_valid)
        self.assertIsNone(result.message)

    def test_reports_missing_headers(self) -> None:
        result = validate_headers(["handle", "name", "rating"])

        self.assertFalse(result.is_valid)
        self.assertEqual(result.message, "Missing headers: message")

    def test_reports_all_missing_headers_in_required_order(self) -> None:
        result = validate_headers(["title"])

        self.assertEqual(result.message, "Missing headers: handle, name, message, rating")


class TestCSVRowValidator(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = CSVRowValidator()

    def test_valid_row_has_no_errors(self) -> None:
        self.assertEqual(self.validator.validate_row(_row()), [])
        self.assertTrue(self.validator.is_valid(_row()))

    def test_handle_acceptance(self) -> None:
        for handle in ("a-b-c", "a1-b2", "abc"):
            with self.subTest(handle=handle):
                self.assertEqual(self.validator.validate_row(_row(handle=handle)), [])

        for handle in ("A-B", "-abc", "abc-", "abc--def", "", None, "abc\n"):
            with self.subTest(handle=handle):
                errors = self.validator.validate_row(_row(handle=handle))
                self.assertEqual(len(errors), 1)
                self.assertIn("Invalid 'Handle'", errors[0])

    def test_handle_error_includes_raw_value(self) -> None:
        errors = self.validator.validate_row(_row(handle="Bad Handle"))

        self.assertEqual(
            errors,
            ["Row 2: Invalid 'Handle' (should be dash-separated, received 'Bad Handle')."],
        )

    def test_blank_name_is_invalid(self) -> None:
        for name in ("", "   ", None):
            with self.subTest(name=name):
                self.assertEqual(
                    self.validator.validate_row(_row(name=name)),
                    ["Row 2: 'Name' is missing or empty."],
                )

    def test_message_length_boundary(self) -> None:
        self.assertEqual(self.validator.validate_row(_row(message="x" * 200)), [])

        for message in ("x" * 201, "", None):
            with self.subTest(length=len(message or "")):
                self.assertEqual(
                    self.validator.validate_row(_row(message=message)),
                    ["Row 2: 'Message' is either missing or exceeds 200 characters."],
                )

    def test_message_length_counts_characters(self) -> None:
        self.assertEqual(self.validator.validate_row(_row(message="é" * 200)), [])

    def test_rating_boundaries(self) -> None:
        for rating in ("1", "5", "3.9", "3abc", " 4"):
            with self.subTest(rating=rating):
                self.assertEqual(self.validator.validate_row(_row(rating=rating)), [])

        for rating in ("0", "6", "abc", "", "-1", None):
            with self.subTest(rating=rating):
                errors = self.validator.validate_row(_row(rating=rating))
                self.assertEqual(len(errors), 1)
                self.assertIn("'Rating' should be a number between 1 and 5", errors[0])

    def test_rating_error_includes_raw_value(self) -> None:
        errors = self.validator.validate_row(_row(rating="ten"))

        self.assertEqual(
            errors,
            ["Row 2: 'Rating' should be a number between 1 and 5 (received 'ten')."],
        )

    def test_all_field_errors_are_reported_in_field_order(self) -> None:
        row = CSVRow(row_number=7, handle="Bad", name=" ", message="", rating="9")

        errors = self.validator.validate_row(row)

        self.assertEqual(len(errors), 4)
        self.assertTrue(errors[0].startswith("Row 7: Invalid 'Handle'"))
        self.assertTrue(errors[1].startswith("Row 7: 'Name'"))
        self.assertTrue(errors[2].startswith("Row 7: 'Message'"))
        self.assertTrue(errors[3].startswith("Row 7: 'Rating'"))


class TestParseLeadingInt(unittest.TestCase):
    def test_parses_integer_prefix(self) -> None:
        self.assertEqual(parse_leading_int("3.9"), 3)
        self.assertEqual(parse_leading_int("3abc"), 3)
        self.assertEqual(parse_leading_int("  +2"), 2)
        self.assertEqual(parse_leading_int("-4"), -4)

    def test_non_numeric_is_none(self) -> None:
        self.assertIsNone(parse_leading_int("abc"))
        self.assertIsNone(parse_leading_int(""))
        self.assertIsNone(parse_leading_int(None))

    def test_hex_prefix_is_parsed_as_hexadecimal(self) -> None:
        self.assertEqual(parse_leading_int("0x3"), 3)
        self.assertEqual(parse_leading_int("0XA"), 10)
        self.assertEqual(parse_leading_int(" -0x4"), -4)
        self.assertEqual(parse_leading_int("03"), 3)
        self.assertIsNone(parse_leading_int("0x"))
        self.assertIsNone(parse_leading_int("0xg"))

    def test_hex_rating_within_range_is_valid(self) -> None:
        row = CSVRow(row_number=2, handle="red-shoe", name="Alice", message="Nice", rating="0x3")

        self.assertEqual(CSVRowValidator().validate_row(row), [])


if __name__ == "__main__":
    unittest.main()
