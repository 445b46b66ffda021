"""
Row mapper for product imports.

Applies a column -> product field mapping to one raw CSV row and returns
a ProductRecord ready for the CMS. Pure: no I/O, no logging.

Leniency rules:
- Missing or blank cells leave the field at its default
- Unparseable numbers become None instead of failing the row
- Booleans are True only for 'true'/'yes'
The only row failure is a missing name.
"""

from decimal import Decimal
from typing import Any, Optional

from exceptions import RowValidationError
from models.product_import import (
    FieldMapping,
    ProductField,
    ProductRecord,
    RawRow,
)
from utils.text_utils import (
    is_truthy,
    parse_lenient_decimal,
    slugify,
    split_list,
)

DEFAULT_FINISH_COLOR = "#000000"

NAME_REQUIRED = "Name is required"

_TEXT_FIELDS = {
    ProductField.NAME: "name",
    ProductField.SKU: "sku",
    ProductField.SLUG: "slug",
    ProductField.SHORT_DESC: "short_desc",
    ProductField.LONG_DESC: "long_desc",
    ProductField.CATEGORY: "category",
}

_DIMENSION_FIELDS = {
    ProductField.WIDTH: "width",
    ProductField.DEPTH: "depth",
    ProductField.HEIGHT: "height",
}


def parse_finishes(value: str) -> list[dict]:
    """
    Parse 'Oak:#A0522D, Walnut' into finish dicts.

    Each segment is split once on ':' into name and color.
    """
    finishes = []
    for segment in split_list(value):
        name, _, color = segment.partition(":")
        finishes.append({
            "name": name.strip() or segment,
            "color_hex": color.strip() or DEFAULT_FINISH_COLOR,
        })
    return finishes


def _positive(value: Optional[Decimal]) -> Optional[Decimal]:
    return value if value is not None and value > 0 else None


def map_row(row: RawRow, mapping: FieldMapping) -> ProductRecord:
    """
    Map one CSV row onto the product schema.

    Args:
        row: Column name -> cell value
        mapping: Column name -> ProductField (SKIP ignores the column)

    Returns:
        ProductRecord with defaults for every unmapped or blank field

    Raises:
        RowValidationError: If the mapped name is empty
    """
    fields: dict[str, Any] = {}
    dimensions: dict[str, Any] = {}
    assets: dict[str, Any] = {}

    for column, target in mapping.items():
        target = ProductField(target)
        if target is ProductField.SKIP:
            continue

        raw = row.get(column)
        if raw is None:
            continue
        value = str(raw).strip()
        if not value:
            continue

        if target in _TEXT_FIELDS:
            fields[_TEXT_FIELDS[target]] = value
        elif target is ProductField.PRICE:
            fields["price"] = _positive(parse_lenient_decimal(value))
        elif target is ProductField.CURRENCY:
            fields["currency"] = value.upper()
        elif target is ProductField.TAGS:
            fields["tags"] = split_list(value)
        elif target in _DIMENSION_FIELDS:
            dimensions[_DIMENSION_FIELDS[target]] = parse_lenient_decimal(value)
        elif target is ProductField.UNIT:
            dimensions["unit"] = value
        elif target is ProductField.FINISHES:
            fields["finishes"] = parse_finishes(value)
        elif target is ProductField.IMAGE_URLS:
            assets["image_urls"] = split_list(value)
        elif target is ProductField.CAD_URLS:
            assets["cad_urls"] = split_list(value)
        elif target is ProductField.GLB_URL:
            assets["glb_url"] = value
        elif target is ProductField.USDZ_URL:
            assets["usdz_url"] = value
        elif target is ProductField.AVAILABILITY:
            fields["availability"] = is_truthy(value)
        elif target is ProductField.HOTEL_GRADE:
            fields["hotel_grade"] = is_truthy(value)

    name = fields.get("name", "")
    if not name:
        raise RowValidationError(NAME_REQUIRED)

    if not fields.get("slug"):
        fields["slug"] = slugify(name)

    return ProductRecord(**fields, dimensions=dimensions, assets=assets)
