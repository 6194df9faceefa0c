"""
app/mappers package marker.
"""

from app.mappers.review_row_mapper import HeaderIndex, ReviewRowMapper, split_line

__all__ = [
    "HeaderIndex",
    "ReviewRowMapper",
    "split_line",
]
