"""FastAPI application for chapterpress."""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from chapterpress.exceptions import (
    InvalidContentError,
    ProjectNotFoundError,
    RecordParseError,
    StorageError,
)
from chapterpress.utils.logging_config import get_logger
from server.routers import convert_router, projects_router
from server.server_config import APP_DESCRIPTION, APP_TITLE

logger = get_logger(__name__)

app = FastAPI(title=APP_TITLE, description=APP_DESCRIPTION)
app.include_router(convert_router)
app.include_router(projects_router)


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc)})


@app.exception_handler(ProjectNotFoundError)
async def project_not_found_handler(request: Request, exc: ProjectNotFoundError) -> JSONResponse:
    logger.warning("Project not found", extra={"path": str(exc.path), "url": str(request.url)})
    return _error(status.HTTP_404_NOT_FOUND, exc)


@app.exception_handler(InvalidContentError)
async def invalid_content_handler(request: Request, exc: InvalidContentError) -> JSONResponse:
    logger.warning("Rejected invalid chapter content", extra={"url": str(request.url), "error": str(exc)})
    return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, exc)


@app.exception_handler(RecordParseError)
async def record_parse_handler(request: Request, exc: RecordParseError) -> JSONResponse:
    logger.warning("Malformed record", extra={"url": str(request.url), "error": str(exc)})
    return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, exc)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error(
        "Storage failure",
        extra={"operation": exc.operation, "path": str(exc.path), "url": str(request.url)},
    )
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, exc)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify that the server is running."""
    return {"status": "healthy"}
