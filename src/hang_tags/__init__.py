"""
Hang tag package - product hang tag PDFs packed into a ZIP archive.
"""

from src.hang_tags.field_extractor import extract_fields
from src.hang_tags.pdf_layout import HangTagRenderer
from src.hang_tags.batch_packer import BatchPacker, BatchResult, ItemOutcome

__all__ = ["extract_fields", "HangTagRenderer", "BatchPacker", "BatchResult", "ItemOutcome"]
