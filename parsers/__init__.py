"""
CSV and row parsers for product imports.
"""

from parsers.row_mapper import map_row
from parsers.csv_parser import (
    parse_csv_preview,
    suggest_mappings,
    CsvPreview,
)

__all__ = [
    "map_row",
    "parse_csv_preview",
    "suggest_mappings",
    "CsvPreview",
]
