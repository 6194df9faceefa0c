"""
app/mappers/review_row_mapper.py

Positional mapping from comma-split CSV lines to typed review rows.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from app.domain.review_import import CSVRow
from app.validators.csv_validator import REQUIRED_HEADERS

FIELD_SEPARATOR = ","


def split_line(line: str) -> list[str]:
    """
    Split one line on commas. Quoted fields are not recognised on import.
    """

    return line.split(FIELD_SEPARATOR)


@dataclass(frozen=True)
class HeaderIndex:
    """
    Column position of each review field in the uploaded file.
    """

    positions: dict[str, int]
    source_headers: tuple[str, ...]

    @classmethod
    def from_headers(cls, headers: Sequence[str]) -> HeaderIndex:
        positions: dict[str, int] = {}
        for index, header in enumerate(headers):
            # A repeated column name maps to its last position.
            if header in REQUIRED_HEADERS:
                positions[header] = index
        return cls(positions=positions, source_headers=tuple(headers))


class ReviewRowMapper:
    """
    Converts raw data lines into ``CSVRow`` records using a ``HeaderIndex``.
    """

    def __init__(self, header_index: HeaderIndex) -> None:
        self._header_index = header_index

    def map_line(self, line: str, *, row_number: int) -> CSVRow:
        cells = split_line(line)
        return CSVRow(
            row_number=row_number,
            handle=self._cell(cells, "handle"),
            name=self._cell(cells, "name"),
            message=self._cell(cells, "message"),
            rating=self._cell(cells, "rating"),
        )

    def _cell(self, cells: Sequence[str], field_name: str) -> str | None:
        position = self._header_index.positions.get(field_name)
        if position is None or position >= len(cells):
            return None
        return cells[position]
