"""
Batch hang tag generation.
Renders every product in a batch and packs the PDFs into one ZIP archive.
"""

import io
import zipfile
from dataclasses import dataclass, field
from typing import Any

from src.hang_tags.exceptions import ArchiveError, InvalidBatchError
from src.hang_tags.field_extractor import extract_fields
from src.hang_tags.pdf_layout import HangTagRenderer
from src.models.hang_tag import RenderOptions
from src.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ItemOutcome:
    """Result of rendering one product: PDF bytes or the failure message."""

    index: int
    identifier: str
    filename: str | None = None
    pdf_bytes: bytes | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.pdf_bytes is not None


@dataclass
class BatchResult:
    """Archive entries (filename -> PDF bytes) in input order, plus failures."""

    entries: dict[str, bytes] = field(default_factory=dict)
    failures: list[ItemOutcome] = field(default_factory=list)

    def add(self, outcome: ItemOutcome):
        if not outcome.succeeded:
            self.failures.append(outcome)
            return

        # Same identifier twice: last product wins, entry keeps its first position
        if outcome.filename in self.entries:
            logger.warning("Duplicate hang tag filename, replacing earlier entry", extra={
                "filename": outcome.filename,
                "index": outcome.index
            })

        self.entries[outcome.filename] = outcome.pdf_bytes


class BatchPacker:
    """Turns a list of product records into a ZIP of hang tag PDFs."""

    def __init__(self, renderer: HangTagRenderer | None = None):
        self.renderer = renderer or HangTagRenderer()

    async def pack(self, records: Any, options: RenderOptions | None = None) -> bytes:
        """
        Render all products and return the ZIP archive bytes.

        Args:
            records: List of product records
            options: Title/price size overrides for the whole batch

        Returns:
            ZIP bytes with one "{identifier}-hangtag.pdf" entry per rendered product

        Raises:
            InvalidBatchError: If records is not a list
            ArchiveError: If the archive cannot be assembled
        """
        result = await self.render_batch(records, options)
        return self.build_archive(result)

    async def render_batch(
        self,
        records: Any,
        options: RenderOptions | None = None
    ) -> BatchResult:
        """
        Render products one at a time, in input order.

        A product that fails is logged and left out; it never stops the batch.
        """
        if not isinstance(records, list):
            raise InvalidBatchError(
                "Invalid products data",
                details={"type": type(records).__name__}
            )

        options = options or RenderOptions()
        total = len(records)

        logger.info("Generating hang tags", extra={
            "product_count": total,
            "title_size": options.title_size,
            "price_size": options.price_size
        })

        result = BatchResult()
        for index, record in enumerate(records, start=1):
            outcome = await self._render_item(record, index, total, options)
            result.add(outcome)

        logger.info("Hang tags generated", extra={
            "rendered": len(result.entries),
            "failed": len(result.failures),
            "total": total
        })

        return result

    async def _render_item(
        self,
        record: Any,
        index: int,
        total: int,
        options: RenderOptions
    ) -> ItemOutcome:
        identifier = f"product-{index}"

        try:
            fields = extract_fields(record, index)
            identifier = fields.identifier

            logger.debug("Processing product", extra={
                "index": index,
                "total": total,
                "identifier": identifier
            })

            pdf_bytes = await self.renderer.render(fields, options)

        except Exception as e:
            logger.error("Hang tag generation failed", extra={
                "index": index,
                "identifier": identifier,
                "error_code": getattr(e, "error_code", "UNEXPECTED_ERROR"),
                "error": str(e)
            }, exc_info=True)
            return ItemOutcome(index=index, identifier=identifier, error=str(e))

        return ItemOutcome(
            index=index,
            identifier=identifier,
            filename=fields.filename,
            pdf_bytes=pdf_bytes
        )

    def build_archive(self, result: BatchResult) -> bytes:
        """Pack rendered hang tags into an in-memory ZIP archive."""
        buffer = io.BytesIO()

        try:
            with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                for filename, pdf_bytes in result.entries.items():
                    archive.writestr(filename, pdf_bytes)
        except Exception as e:
            raise ArchiveError(
                f"Failed to build hang tag archive: {e}",
                details={"entry_count": len(result.entries)}
            ) from e

        return buffer.getvalue()
