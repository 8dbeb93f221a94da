"""
Hang tag PDF rendering.
Draws one product onto a single 2.7" x 3.65" page.

Tag layout (fixed coordinates, sections do not reflow):
+----------------------------+
| [VENDOR]        Model SKU  |
|        Product Title       |
|   +--------------------+   |
|   |   Product Image    |   |
|   +--------------------+   |
| INCLUDES:                  |
| • Item                     |
|          $199.00           |
|        MSRP $249.00        |
| Factory Reconditioned  SKU |
+----------------------------+
"""

import io
from dataclasses import dataclass, replace

from reportlab.lib.colors import HexColor
from reportlab.lib.units import inch
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from src.hang_tags.exceptions import RenderError
from src.models.hang_tag import ProductFields, RenderOptions
from src.logger import get_logger

logger = get_logger(__name__)

PAGE_WIDTH = 2.7 * inch
PAGE_HEIGHT = 3.65 * inch
PAGE_SIZE = (PAGE_WIDTH, PAGE_HEIGHT)
MARGIN = 8

MAX_PRICE_SIZE = 28
LINE_HEIGHT_RATIO = 1.15

# Running cursor for the sections below the image placeholder
CURSOR_START = 175
INCLUDES_HEADER_ADVANCE = 12
INCLUDES_LINE_ADVANCE = 9
INCLUDES_TRAILING_GAP = 5
PRICE_GAP = 2

BLACK = "#000000"
WHITE = "#ffffff"
VENDOR_RED = "#e53e3e"
RECON_BLUE = "#3182ce"


@dataclass(frozen=True)
class TextRegion:
    """Where and how a piece of text is drawn. y is the top edge, from page top."""

    x: float
    y: float
    width: float | None = None
    font: str = "Helvetica"
    size: float = 8
    color: str = BLACK
    align: str = "left"
    line_gap: float = 0


@dataclass(frozen=True)
class BoxRegion:
    """A rectangle, filled or outlined. y is the top edge, from page top."""

    x: float
    y: float
    width: float
    height: float
    color: str
    filled: bool = True


# Cursor-relative regions carry y=0 and are placed with dataclasses.replace
LAYOUT = {
    "vendor_badge": BoxRegion(MARGIN, 15, 60, 20, VENDOR_RED),
    "vendor_name": TextRegion(12, 22, 52, "Helvetica-Bold", 8, WHITE, "center"),
    "model": TextRegion(100, 20, 86, "Helvetica-Bold", 10, BLACK, "right"),
    "title": TextRegion(12, 45, 170, "Helvetica-Bold", 11, BLACK, "center", line_gap=1),
    "image_box": BoxRegion(25, 85, 144, 80, "#cccccc", filled=False),
    "image_caption": TextRegion(25, 121, 144, "Helvetica", 8, "#999999", "center"),
    "includes_header": TextRegion(12, 0, None, "Helvetica-BoldOblique", 8),
    "includes_item": TextRegion(12, 0, 170, "Helvetica", 7),
    "price": TextRegion(30, 0, 134, "Helvetica-Bold", 24, BLACK, "center"),
    "msrp": TextRegion(30, 0, 134, "Helvetica-Oblique", 10, "#666666", "center"),
    "recon_bar": BoxRegion(0, 240, PAGE_WIDTH, 22.8, RECON_BLUE),
    "recon_label": TextRegion(MARGIN, 248, None, "Helvetica-Bold", 8, WHITE),
    "recon_identifier": TextRegion(130, 248, None, "Helvetica-Bold", 8, WHITE),
}


def format_price(value: float) -> str:
    """Format a price as dollars with two decimals ($19.99)."""
    return f"${value:.2f}"


class HangTagRenderer:
    """Renders product hang tags as single-page PDFs."""

    def __init__(self, layout: dict | None = None):
        self.layout = layout or LAYOUT

    async def render(
        self,
        fields: ProductFields,
        options: RenderOptions | None = None
    ) -> bytes:
        """
        Render one hang tag.

        Args:
            fields: Canonical product fields
            options: Title/price size overrides

        Returns:
            PDF bytes (one page)

        Raises:
            RenderError: If drawing fails; no partial PDF is returned
        """
        options = options or RenderOptions()

        try:
            pdf_bytes = self._render_pdf(fields, options)
        except Exception as e:
            raise RenderError(
                f"Failed to render hang tag for {fields.identifier}: {e}",
                details={"identifier": fields.identifier}
            ) from e

        logger.debug("Hang tag rendered", extra={
            "identifier": fields.identifier,
            "size_bytes": len(pdf_bytes)
        })

        return pdf_bytes

    def _render_pdf(self, fields: ProductFields, options: RenderOptions) -> bytes:
        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pagesize=PAGE_SIZE)
        c.setTitle(f"{fields.identifier} hang tag")

        self._draw_box(c, self.layout["vendor_badge"])
        self._draw_text(c, fields.vendor.upper(), self.layout["vendor_name"])
        self._draw_text(c, f"Model {fields.sku}", self.layout["model"])
        self._draw_text(
            c,
            fields.title,
            replace(self.layout["title"], size=options.title_size)
        )

        self._draw_box(c, self.layout["image_box"])
        self._draw_text(c, "Product Image", self.layout["image_caption"])

        cursor = CURSOR_START
        if fields.includes:
            cursor = self._draw_includes(c, fields.includes, cursor)

        cursor = self._draw_price(c, fields.price, options, cursor)

        if fields.shows_msrp:
            self._draw_msrp(c, fields.compare_price, cursor)

        if fields.is_reconditioned:
            self._draw_recon_banner(c, fields.identifier)

        c.save()
        return buffer.getvalue()

    def _draw_includes(self, c: canvas.Canvas, items: list[str], cursor: float) -> float:
        """Draw the INCLUDES block; returns the advanced cursor."""
        self._draw_text(c, "INCLUDES:", replace(self.layout["includes_header"], y=cursor))
        cursor += INCLUDES_HEADER_ADVANCE

        for item in items:
            self._draw_text(c, f"• {item}", replace(self.layout["includes_item"], y=cursor))
            cursor += INCLUDES_LINE_ADVANCE

        return cursor + INCLUDES_TRAILING_GAP

    def _draw_price(
        self,
        c: canvas.Canvas,
        price: float,
        options: RenderOptions,
        cursor: float
    ) -> float:
        size = min(options.price_size, MAX_PRICE_SIZE)
        self._draw_text(c, format_price(price), replace(self.layout["price"], y=cursor, size=size))
        return cursor + size + PRICE_GAP

    def _draw_msrp(self, c: canvas.Canvas, compare_price: float, cursor: float):
        """Draw the struck-through MSRP line."""
        region = replace(self.layout["msrp"], y=cursor)
        text = f"MSRP {format_price(compare_price)}"
        self._draw_text(c, text, region)

        text_width = c.stringWidth(text, region.font, region.size)
        start_x = region.x + (region.width - text_width) / 2
        strike_y = self._baseline(region.y, region.font, region.size) + region.size * 0.3

        c.setStrokeColor(HexColor(region.color))
        c.setLineWidth(0.75)
        c.line(start_x, strike_y, start_x + text_width, strike_y)

    def _draw_recon_banner(self, c: canvas.Canvas, identifier: str):
        self._draw_box(c, self.layout["recon_bar"])
        self._draw_text(c, "Factory Reconditioned Tool", self.layout["recon_label"])
        self._draw_text(c, identifier, self.layout["recon_identifier"])

    def _draw_box(self, c: canvas.Canvas, region: BoxRegion):
        color = HexColor(region.color)
        c.setStrokeColor(color)
        if region.filled:
            c.setFillColor(color)

        c.rect(
            region.x,
            PAGE_HEIGHT - region.y - region.height,
            region.width,
            region.height,
            stroke=1,
            fill=1 if region.filled else 0
        )

    def _draw_text(self, c: canvas.Canvas, text: str, region: TextRegion):
        """Draw text into a region, wrapping to its width when it has one."""
        c.setFont(region.font, region.size)
        c.setFillColor(HexColor(region.color))

        if region.width is None:
            lines = [text]
        else:
            lines = simpleSplit(text, region.font, region.size, region.width) or [""]

        leading = region.size * LINE_HEIGHT_RATIO + region.line_gap

        for index, line in enumerate(lines):
            baseline = self._baseline(region.y + index * leading, region.font, region.size)

            if region.align == "center":
                c.drawCentredString(region.x + region.width / 2, baseline, line)
            elif region.align == "right":
                c.drawRightString(region.x + region.width, baseline, line)
            else:
                c.drawString(region.x, baseline, line)

    @staticmethod
    def _baseline(top: float, font: str, size: float) -> float:
        """Convert a top-down text position to a PDF baseline y."""
        return PAGE_HEIGHT - top - pdfmetrics.getAscent(font, size)
