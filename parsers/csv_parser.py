"""
CSV parser for product import previews.

Reads an uploaded CSV into raw string rows and suggests a column mapping,
so the admin console can show the mapping step without parsing client-side.
"""

import re
from dataclasses import dataclass, field
from io import BytesIO
from typing import Optional, Union
import structlog

import pandas as pd

from exceptions import CsvParseError
from models.product_import import (
    PRODUCT_FIELD_LABELS,
    FieldMapping,
    ProductField,
    RawRow,
)

logger = structlog.get_logger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]")


@dataclass
class CsvPreview:
    """Result of parsing an uploaded CSV."""
    filename: str
    headers: list[str] = field(default_factory=list)
    rows: list[RawRow] = field(default_factory=list)
    suggested_mappings: FieldMapping = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.rows)


def _normalize_header(header: str) -> str:
    return _NON_ALNUM.sub("", header.lower())


def suggest_mappings(headers: list[str]) -> FieldMapping:
    """
    Guess a product field for each CSV header.

    A header matches the first field (in display order) whose normalized
    value it contains: "Product Name" → name, "Width (cm)" → width,
    "Image URLs" → image_urls. Headers with no match are left out.
    """
    suggestions: FieldMapping = {}
    for header in headers:
        normalized = _normalize_header(header)
        for product_field in PRODUCT_FIELD_LABELS:
            if product_field is ProductField.SKIP:
                continue
            if _normalize_header(product_field.value) in normalized:
                suggestions[header] = product_field
                break
    return suggestions


def parse_csv_preview(
    file: Union[bytes, BytesIO],
    filename: Optional[str] = None,
) -> CsvPreview:
    """
    Parse an uploaded CSV file.

    Every cell is read as a string; blank cells become "" and blank lines
    are skipped.

    Args:
        file: File content or file-like object
        filename: Original filename (must end in .csv)

    Returns:
        CsvPreview with headers, rows and suggested mappings

    Raises:
        CsvParseError: If the file is not a CSV, cannot be read, or has no rows
    """
    filename = filename or "upload.csv"
    if not filename.lower().endswith(".csv"):
        raise CsvParseError(
            message="Please upload a CSV file",
            details={"filename": filename}
        )

    if isinstance(file, bytes):
        file = BytesIO(file)

    logger.info("parsing_csv", filename=filename)

    try:
        df = pd.read_csv(
            file,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
        )
    except pd.errors.EmptyDataError:
        raise CsvParseError(message="CSV file is empty or invalid")
    except (pd.errors.ParserError, UnicodeDecodeError, ValueError) as e:
        logger.error("csv_read_failed", filename=filename, error=str(e))
        raise CsvParseError(
            message=f"Failed to parse CSV: {e}",
            details={"original_error": str(e)}
        )

    if df.empty:
        raise CsvParseError(message="CSV file is empty or invalid")

    headers = [str(column).strip() for column in df.columns]
    df.columns = headers
    rows = df.to_dict(orient="records")

    preview = CsvPreview(
        filename=filename,
        headers=headers,
        rows=rows,
        suggested_mappings=suggest_mappings(headers),
    )

    logger.info(
        "csv_parsed",
        filename=filename,
        rows=preview.total,
        columns=len(headers),
        suggested=len(preview.suggested_mappings),
    )

    return preview
