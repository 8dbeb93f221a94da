"""
Pydantic models for hang tag generation.
"""

import re
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from src.common.text_utils import parse_leading_int
from src.config import settings

MAX_FONT_SIZE = 200

_PATH_SEPARATORS = re.compile(r"[\\/]+")


class RenderOptions(BaseModel):
    """Per-batch rendering overrides."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title_size: int = Field(
        default_factory=lambda: settings.default_title_size,
        alias="titleSize",
        description="Title font size in points"
    )
    price_size: int = Field(
        default_factory=lambda: settings.default_price_size,
        alias="priceSize",
        description="Price font size in points (capped at render time)"
    )

    @field_validator("title_size", "price_size", mode="before")
    @classmethod
    def lenient_size(cls, value: Any, info: ValidationInfo) -> int:
        """Fall back to the configured default for unusable or absurd sizes."""
        parsed = parse_leading_int(value)
        if parsed is None or parsed <= 0 or parsed > MAX_FONT_SIZE:
            return getattr(settings, f"default_{info.field_name}")
        return parsed


class ProductFields(BaseModel):
    """Canonical, schema-independent view of a product record."""

    identifier: str
    sku: str = ""
    title: str = "Product"
    vendor: str = "Brand"
    price: float = 0.0
    compare_price: float = 0.0
    tags: list[str] = Field(default_factory=list)
    includes: list[str] = Field(default_factory=list)
    is_reconditioned: bool = False

    @property
    def filename(self) -> str:
        """
        Archive entry name for this product's hang tag.

        Path separators become dashes so an identifier cannot place the
        entry outside the archive root.
        """
        safe_identifier = _PATH_SEPARATORS.sub("-", self.identifier)
        return f"{safe_identifier}-hangtag.pdf"

    @property
    def shows_msrp(self) -> bool:
        """MSRP is shown only when it is a real markdown."""
        return self.compare_price > self.price and self.compare_price > 0


class GenerateTagsRequest(BaseModel):
    """Request body for hang tag generation."""

    products: Any = Field(None, description="List of product records")
    options: RenderOptions = Field(default_factory=RenderOptions)

    @field_validator("options", mode="before")
    @classmethod
    def default_options(cls, value: Any) -> Any:
        return {} if value is None else value
