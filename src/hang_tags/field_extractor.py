"""
Product field extraction.
Normalizes Shopify API records and Shopify CSV export rows into ProductFields.
"""

import re
from collections.abc import Mapping
from typing import Any

from src.common.text_utils import parse_leading_float, strip_markup
from src.hang_tags.exceptions import InvalidProductError
from src.models.hang_tag import ProductFields

# Candidate source keys per canonical field, highest priority first.
# API records use snake_case keys, CSV exports use the spreadsheet headers.
FIELD_SOURCES: dict[str, tuple[str, ...]] = {
    "identifier": ("sku", "Variant SKU", "handle"),
    "sku": ("sku", "Variant SKU"),
    "title": ("title", "Title"),
    "vendor": ("vendor", "Vendor"),
    "price": ("price", "Variant Price"),
    "compare_price": ("compare_at_price", "Variant Compare At Price"),
    "tags": ("tags", "Tags"),
    "body_html": ("body_html", "Body (HTML)"),
}

MAX_INCLUDES = 4
RECON_TAG = "recon"
RECON_SKU_SUFFIX = "-R"

_INCLUDES_PATTERN = re.compile(r'INCLUDES\s*:\s*(.*?)(?:</?[^>]*>|$)', re.IGNORECASE)
_INCLUDES_SEPARATOR = re.compile(r'[,;]|\band\b', re.IGNORECASE)


def _first_present(record: Mapping, field: str) -> Any:
    """Return the first non-empty value among the field's source keys."""
    for key in FIELD_SOURCES[field]:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return None


def _text(record: Mapping, field: str, default: str = "") -> str:
    value = _first_present(record, field)
    return default if value is None else str(value)


def parse_tags(value: Any) -> list[str]:
    """Tags arrive as a list (API) or a comma-separated string (CSV export)."""
    if value is None:
        return []
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, (list, tuple, set)):
        parts = [str(tag) for tag in value if tag is not None]
    else:
        return []
    return [part.strip() for part in parts if part.strip()]


def parse_includes(body_html: str) -> list[str]:
    """
    Pull the "INCLUDES:" item list out of a product description.

    The list runs from the marker to the next HTML tag (or end of text) and
    is split on commas, semicolons and the word "and". Only the first four
    items are kept since the tag has room for no more.

    Example:
        >>> parse_includes("<p>INCLUDES: Bolt, Case and Manual<br></p>")
        ['Bolt', 'Case', 'Manual']
    """
    if not body_html:
        return []

    match = _INCLUDES_PATTERN.search(body_html)
    if not match:
        return []

    includes_text = strip_markup(match.group(1)).strip()
    items = [item.strip() for item in _INCLUDES_SEPARATOR.split(includes_text)]
    return [item for item in items if item][:MAX_INCLUDES]


def is_reconditioned(tags: list[str], sku: str, raw_tags: Any = None) -> bool:
    """
    Recon units are tagged "Recon" or carry a "-R" SKU suffix.

    A tag list must hold "recon" as a whole tag. A raw tag string (Shopify
    API and CSV both send one) matches anywhere in the string, so tags like
    "Factory Reconditioned" also count.
    """
    if isinstance(raw_tags, str) and RECON_TAG in raw_tags.lower():
        return True
    if any(tag.lower() == RECON_TAG for tag in tags):
        return True
    return sku.endswith(RECON_SKU_SUFFIX)


def extract_fields(record: Any, index: int) -> ProductFields:
    """
    Normalize one product record.

    Args:
        record: Product dict in API or CSV-export shape
        index: 1-based position in the batch, used for unnamed products

    Returns:
        ProductFields with every field populated

    Raises:
        InvalidProductError: If record is not a mapping
    """
    if not isinstance(record, Mapping):
        raise InvalidProductError(
            f"Product {index} is not an object",
            details={"index": index, "type": type(record).__name__}
        )

    sku = _text(record, "sku")
    raw_tags = _first_present(record, "tags")
    tags = parse_tags(raw_tags)

    return ProductFields(
        identifier=_text(record, "identifier", default=f"product-{index}"),
        sku=sku,
        title=_text(record, "title", default="Product"),
        vendor=_text(record, "vendor", default="Brand"),
        price=parse_leading_float(_first_present(record, "price")),
        compare_price=parse_leading_float(_first_present(record, "compare_price")),
        tags=tags,
        includes=parse_includes(_text(record, "body_html")),
        is_reconditioned=is_reconditioned(tags, sku, raw_tags),
    )
