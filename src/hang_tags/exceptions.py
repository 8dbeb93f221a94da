"""
Hang tag generation errors.

Batch-level errors (InvalidBatchError, ArchiveError) fail the whole request.
Item-level errors (InvalidProductError, RenderError) are caught by the batch
packer and only drop the offending product from the archive.
"""


class HangTagError(Exception):
    """Base error for hang tag generation."""

    error_code = "HANG_TAG_ERROR"

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidBatchError(HangTagError):
    """Top-level products payload is not a list."""

    error_code = "INVALID_PRODUCTS"


class InvalidProductError(HangTagError):
    """A single product record is not an object."""

    error_code = "INVALID_PRODUCT"


class RenderError(HangTagError):
    """Drawing a single hang tag failed."""

    error_code = "RENDER_FAILED"


class ArchiveError(HangTagError):
    """Packing rendered hang tags into the ZIP archive failed."""

    error_code = "GENERATION_FAILED"
