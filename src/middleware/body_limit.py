"""
Request body size limit middleware.

Product batches are posted as one JSON document. Declared sizes are checked
from Content-Length before anything is read; chunked uploads are counted as
they arrive and cut off once they pass the limit.
"""

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse

from src.config import settings
from src.models.common import ErrorResponse
from src.logger import get_logger

logger = get_logger(__name__)


def _too_large_detail() -> dict:
    return ErrorResponse(
        error_code="PAYLOAD_TOO_LARGE",
        message=f"Request body exceeds {settings.max_request_body_mb}MB limit"
    ).model_dump(mode="json")


class BodyLimitMiddleware:
    """ASGI middleware enforcing settings.max_request_body_mb."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit_bytes = settings.max_request_body_bytes
        path = scope.get("path", "")
        headers = dict(scope.get("headers", []))
        content_length = headers.get(b"content-length")

        if content_length is not None:
            try:
                size_bytes = int(content_length)
            except ValueError:
                response = JSONResponse(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    content=ErrorResponse(
                        error_code="INVALID_CONTENT_LENGTH",
                        message="Content-Length header is not a number"
                    ).model_dump(mode="json")
                )
                await response(scope, receive, send)
                return

            if size_bytes > limit_bytes:
                logger.warning("Request body too large", extra={
                    "path": path,
                    "size_bytes": size_bytes,
                    "limit_bytes": limit_bytes
                })
                response = JSONResponse(
                    status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                    content=_too_large_detail()
                )
                await response(scope, receive, send)
                return

        received_bytes = 0

        async def limited_receive():
            nonlocal received_bytes
            message = await receive()

            if message["type"] == "http.request":
                received_bytes += len(message.get("body", b""))
                if received_bytes > limit_bytes:
                    logger.warning("Streamed request body too large", extra={
                        "path": path,
                        "received_bytes": received_bytes,
                        "limit_bytes": limit_bytes
                    })
                    # FastAPI re-raises HTTPException from body reading as-is
                    raise HTTPException(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        detail=_too_large_detail()
                    )

            return message

        await self.app(scope, limited_receive, send)
