"""
Hang tag routes.
Turns an uploaded product batch into a ZIP of printable hang tag PDFs.
"""

from fastapi import APIRouter, HTTPException, status, Response

from src.config import settings
from src.hang_tags import BatchPacker
from src.hang_tags.exceptions import ArchiveError, InvalidBatchError
from src.models.common import ErrorResponse
from src.models.hang_tag import GenerateTagsRequest
from src.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


def _error_detail(error_code: str, message: str, details: dict | None = None) -> dict:
    return ErrorResponse(
        error_code=error_code,
        message=message,
        details=details
    ).model_dump(mode="json")


@router.post(
    "/generate-tags",
    response_class=Response,
    status_code=status.HTTP_200_OK,
    responses={
        200: {"content": {"application/zip": {}}, "description": "ZIP of hang tag PDFs"},
        400: {"model": ErrorResponse, "description": "Invalid products data"},
        500: {"model": ErrorResponse, "description": "Generation failed"}
    },
    summary="Generate hang tags",
    description="""
    Render one 2.7" x 3.65" hang tag PDF per product and return them as a ZIP.

    Accepts Shopify API product records or Shopify CSV export rows.
    Products that fail to render are left out of the archive; the rest
    of the batch is still returned.

    Options:
    - titleSize: title font size (default 11)
    - priceSize: price font size (default 24, capped at 28)
    """
)
async def generate_tags(request: GenerateTagsRequest):
    """
    Generate hang tags for a product batch.

    Returns:
        ZIP archive (application/zip)

    Raises:
        HTTPException: 400 for a malformed batch, 500 if the archive fails
    """
    packer = BatchPacker()

    try:
        archive_bytes = await packer.pack(request.products, request.options)

    except InvalidBatchError as e:
        logger.warning("Invalid hang tag request", extra={
            "error": e.message,
            **e.details
        })
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=_error_detail(e.error_code, e.message, e.details)
        )

    except ArchiveError as e:
        logger.error("Hang tag archive failed", extra={
            "error": e.message
        }, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=_error_detail(e.error_code, e.message, e.details)
        )

    return Response(
        content=archive_bytes,
        media_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="{settings.archive_filename}"'
        }
    )
