"""
app/validators package marker.
"""

from app.validators.csv_validator import (
    REQUIRED_HEADERS,
    CSVRowValidator,
    HeaderValidation,
    parse_leading_int,
    validate_headers,
)

__all__ = [
    "REQUIRED_HEADERS",
    "CSVRowValidator",
    "HeaderValidation",
    "parse_leading_int",
    "validate_headers",
]
