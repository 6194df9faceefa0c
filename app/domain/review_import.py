"""
app/domain/review_import.py

Domain models used by the CSV review import and export flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

IMPORT_STATUS_SUCCESS = "success"
IMPORT_STATUS_ERROR = "error"


@dataclass(frozen=True)
class CSVRow:
    """
    One raw CSV data row keyed by the required review columns.

    Cells absent from a short line are ``None``.
    """

    row_number: int
    handle: str | None = None
    name: str | None = None
    message: str | None = None
    rating: str | None = None


@dataclass(frozen=True)
class ParsedProduct:
    """
    Preview summary for one product handle, taken from its first CSV row.
    """

    handle: str
    name: str
    message: str
    rating: str


@dataclass(frozen=True)
class ProductReview:
    """
    One review entry stored in a product's reviews metafield.
    """

    id: str
    name: str
    message: str
    rating: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "message": self.message,
            "rating": self.rating,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> ProductReview:
        return cls(
            id=str(payload.get("id", "")),
            name=str(payload.get("name", "")),
            message=str(payload.get("message", "")),
            rating=_coerce_rating(payload.get("rating")),
        )


@dataclass(frozen=True)
class ProductRef:
    """
    Minimal product identity returned by the Admin API.
    """

    id: str
    handle: str | None = None
    title: str | None = None


@dataclass(frozen=True)
class MetafieldRef:
    """
    Reviews metafield attached to a product.
    """

    id: str
    namespace: str
    key: str
    value: str | None = None


@dataclass(frozen=True)
class ProductReviews:
    """
    A product, its reviews metafield (if any) and the decoded review list.

    ``entries`` holds the metafield items exactly as stored and is what gets
    written back; ``reviews`` is the typed view of the dict items among them.
    """

    product: ProductRef
    metafield: MetafieldRef | None
    reviews: list[ProductReview] = field(default_factory=list)
    entries: list[Any] = field(default_factory=list)

    @classmethod
    def from_entries(
        cls,
        product: ProductRef,
        metafield: MetafieldRef | None,
        entries: list[Any],
    ) -> ProductReviews:
        return cls(
            product=product,
            metafield=metafield,
            reviews=[ProductReview.from_dict(item) for item in entries if isinstance(item, dict)],
            entries=list(entries),
        )


@dataclass(frozen=True)
class ProductPage:
    """
    One page of products with their decoded reviews and the forward cursor.
    """

    products: list[ProductReviews] = field(default_factory=list)
    end_cursor: str | None = None
    has_next_page: bool = False


@dataclass(frozen=True)
class MetafieldDefinition:
    """
    Reviews metafield definition registered for products.
    """

    name: str
    type_name: str | None = None


def to_metafield_entry(item: ProductReview | Any) -> Any:
    """
    Return the JSON value stored for one review list item.

    New reviews are serialized; entries read from the metafield pass through untouched.
    """

    if isinstance(item, ProductReview):
        return item.to_dict()
    return item


def entry_has_id(entry: Any, review_id: str) -> bool:
    return isinstance(entry, dict) and str(entry.get("id", "")) == review_id


@dataclass(frozen=True)
class ImportResult:
    """
    Outcome of the parse phase.

    On error only ``error`` and ``details`` are meaningful; on success only
    ``products`` and ``products_raw``.
    """

    status: Literal["success", "error"]
    error: str | None = None
    details: list[str] = field(default_factory=list)
    products: list[ParsedProduct] = field(default_factory=list)
    products_raw: dict[str, list[CSVRow]] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.status == IMPORT_STATUS_SUCCESS


@dataclass(frozen=True)
class UploadResult:
    """
    Outcome of the commit phase.
    """

    status: Literal["success", "error"]
    error: str | None = None
    details: list[str] = field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return self.status == IMPORT_STATUS_SUCCESS


def _coerce_rating(value: Any) -> int:
    # Older metafield entries stored the rating as a form string.
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
