"""
Text utilities for spreadsheet cell values.

Used by the row mapper for slugs and lenient number parsing.
"""

import math
import re
import unicodedata
from decimal import Decimal, InvalidOperation
from typing import Optional

DEFAULT_SLUG = "product"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_LEADING_NUMBER = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def fold_accents(text: str) -> str:
    """
    Remove accent marks, keeping the base characters.

    - "Fauteuil Élégant" → "Fauteuil Elegant"
    - "Sillón" → "Sillon"
    """
    # NFD decomposition separates base chars from accents (category 'Mn')
    normalized = unicodedata.normalize("NFD", text)
    return "".join(c for c in normalized if unicodedata.category(c) != "Mn")


def slugify(name: str) -> str:
    """
    Build a URL slug from a product name.

    Lowercase, accents folded, every run of non-alphanumerics becomes a
    single hyphen, no leading or trailing hyphen:
    - "Chair A" → "chair-a"
    - "  Lounge -- Chair (Oak) " → "lounge-chair-oak"
    - "Sillón Élégant" → "sillon-elegant"

    Names with no alphanumeric characters get DEFAULT_SLUG.
    """
    slug = _NON_ALNUM.sub("-", fold_accents(name).lower().strip()).strip("-")
    return slug or DEFAULT_SLUG


def parse_lenient_decimal(value: Optional[str]) -> Optional[Decimal]:
    """
    Parse the leading number of a cell, ignoring trailing text.

    - "129.99" → Decimal("129.99")
    - "45 cm" → Decimal("45")
    - "abc", "" → None
    - "0" → None (zero is treated as missing)
    - "1e400" → None (out of float range)

    Malformed input is never an error; it just yields None.
    """
    if not value:
        return None

    match = _LEADING_NUMBER.match(value.strip())
    if not match:
        return None

    try:
        number = Decimal(match.group(0))
    except InvalidOperation:
        return None

    # Beyond float range the CMS payload cannot carry it
    if number == 0 or not number.is_finite() or math.isinf(float(number)):
        return None
    return number


def split_list(value: str) -> list[str]:
    """Split a comma-separated cell, trimming items and dropping empties."""
    return [item.strip() for item in value.split(",") if item.strip()]


def is_truthy(value: str) -> bool:
    """True for 'true' or 'yes' (any case); anything else is False."""
    return value.strip().lower() in ("true", "yes")
