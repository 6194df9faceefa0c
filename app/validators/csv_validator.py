"""
app/validators/csv_validator.py

Header and row-level validation for CSV review import.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Sequence

from app.domain.review_import import CSVRow

REQUIRED_HEADERS: tuple[str, ...] = ("handle", "name", "message", "rating")

HANDLE_PATTERN = re.compile(r"[a-z0-9]+(-[a-z0-9]+)*")
LEADING_INT_PATTERN = re.compile(r"\s*([+-]?)(?:(0[xX])([0-9a-fA-F]+)?|([0-9]+))")

MAX_MESSAGE_LENGTH = 200
MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class HeaderValidation:
    """
    Result of checking the header line for required columns.
    """

    missing: tuple[str, ...]

    @property
    def is_valid(self) -> bool:
        return not self.missing

    @property
    def message(self) -> str | None:
        if not self.missing:
            return None
        return f"Missing headers: {', '.join(self.missing)}"


def validate_headers(
    headers: Sequence[str],
    *,
    required: Sequence[str] = REQUIRED_HEADERS,
) -> HeaderValidation:
    """
    Check that every required column name is present, in any order.
    """

    present = set(headers)
    return HeaderValidation(missing=tuple(name for name in required if name not in present))


def parse_leading_int(value: str | None) -> int | None:
    """
    Parse the leading integer of a string, ignoring any trailing characters.

    ``"3abc"`` and ``"3.9"`` both give 3; strings without a leading integer
    give None. A ``0x`` prefix switches to hexadecimal, so ``"0x3"`` gives 3
    and a bare ``"0x"`` gives None.
    """

    if value is None:
        return None
    match = LEADING_INT_PATTERN.match(value)
    if match is None:
        return None
    sign, hex_prefix, hex_digits, digits = match.groups()
    if hex_prefix:
        if hex_digits is None:
            return None
        number = int(hex_digits, 16)
    else:
        number = int(digits)
    return -number if sign == "-" else number


class CSVRowValidator:
    """
    Validates one review row. Every field is checked; all failures are reported.
    """

    def validate_row(self, row: CSVRow) -> list[str]:
        """
        Return the diagnostics for one row; an empty list means the row is valid.
        """

        errors: list[str] = []
        self._validate_handle(row, errors)
        self._validate_name(row, errors)
        self._validate_message(row, errors)
        self._validate_rating(row, errors)
        return errors

    def is_valid(self, row: CSVRow) -> bool:
        return not self.validate_row(row)

    def _validate_handle(self, row: CSVRow, errors: list[str]) -> None:
        handle = row.handle
        if not handle or HANDLE_PATTERN.fullmatch(handle) is None:
            errors.append(
                f"Row {row.row_number}: Invalid 'Handle' (should be dash-separated, "
                f"received '{self._stringify_value(handle)}')."
            )

    def _validate_name(self, row: CSVRow, errors: list[str]) -> None:
        if self._is_blank(row.name):
            errors.append(f"Row {row.row_number}: 'Name' is missing or empty.")

    def _validate_message(self, row: CSVRow, errors: list[str]) -> None:
        message = row.message
        if not message or len(message) > MAX_MESSAGE_LENGTH:
            errors.append(
                f"Row {row.row_number}: 'Message' is either missing or exceeds "
                f"{MAX_MESSAGE_LENGTH} characters."
            )

    def _validate_rating(self, row: CSVRow, errors: list[str]) -> None:
        rating = parse_leading_int(row.rating)
        if rating is None or not MIN_RATING <= rating <= MAX_RATING:
            errors.append(
                f"Row {row.row_number}: 'Rating' should be a number between "
                f"{MIN_RATING} and {MAX_RATING} (received '{self._stringify_value(row.rating)}')."
            )

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        return str(value).strip() == ""

    @staticmethod
    def _stringify_value(value: Any) -> str:
        if value is None:
            return ""
        return str(value)
