"""
Hang Tag Service - FastAPI Application Entry Point
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config import settings
from src.logger import get_logger
from src.middleware.body_limit import BodyLimitMiddleware
from src.models.common import ErrorResponse
from src.routes.hang_tag_routes import router as hang_tag_router

logger = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Hang Tag Service starting", extra={
        "environment": settings.environment,
        "log_level": settings.log_level,
        "port": settings.port
    })

    yield

    logger.info("Hang Tag Service shutting down")


app = FastAPI(
    title="Hang Tag Service",
    description="Printable product hang tag PDFs from Shopify product data",
    version=VERSION,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else settings.cors_origins,
    allow_credentials=not settings.is_development,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(BodyLimitMiddleware)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors."""
    logger.warning("Request validation failed", extra={
        "path": request.url.path,
        "errors": len(exc.errors())
    })

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            error_code="INVALID_REQUEST",
            message="Invalid request body",
            details={"errors": jsonable_errors(exc)}
        ).model_dump(mode="json")
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Return HTTP errors as a top-level ErrorResponse, not nested under "detail"."""
    if isinstance(exc.detail, dict) and "error_code" in exc.detail:
        content = exc.detail
    else:
        content = ErrorResponse(
            error_code=f"HTTP_{exc.status_code}",
            message=str(exc.detail)
        ).model_dump(mode="json")

    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions."""
    logger.error("Unhandled exception", extra={
        "path": request.url.path,
        "method": request.method,
        "error": str(exc)
    }, exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error_code="GENERATION_FAILED",
            message=str(exc) or "An unexpected error occurred"
        ).model_dump(mode="json")
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Reduce pydantic errors to location and message."""
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "version": VERSION,
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


# Root endpoint
@app.get("/")
async def root():
    """Upload page when one is deployed, API information otherwise."""
    index_page = Path(settings.static_dir) / "index.html"
    if index_page.is_file():
        return FileResponse(index_page)

    return {
        "service": "Hang Tag Service",
        "version": VERSION,
        "docs": "/docs",
        "health": "/health"
    }


app.include_router(hang_tag_router, prefix="/api", tags=["hang-tags"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level
    )
