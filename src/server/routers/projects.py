"""Project endpoints for the API: import, export, assets and chapter saves."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from chapterpress.assets import copy_asset_and_encode
from chapterpress.exceptions import ProjectNotFoundError
from chapterpress.export import export_epub, export_rtf
from chapterpress.ingestion import ImportOptions, import_chapters
from chapterpress.schemas import dump_document
from chapterpress.settings import JsonSettingsStore, SettingsStore, remember_project, resolve_font_family
from chapterpress.storage import ProjectStore
from chapterpress.utils.logging_config import get_logger
from server.models import (
    AssetRequest,
    ErrorResponse,
    ExportRequest,
    ExportResponse,
    ImportRequest,
    SaveChapterRequest,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/projects")

COMMON_PROJECT_RESPONSES: dict[int | str, dict[str, Any]] = {
    404: {"model": ErrorResponse, "description": "Project not found"},
    422: {"model": ErrorResponse, "description": "Invalid content or malformed record"},
    500: {"model": ErrorResponse, "description": "Storage failure"},
}


def get_settings_store() -> SettingsStore:
    """Settings store used for the application-level font and recent project."""
    return JsonSettingsStore()


SettingsDep = Annotated[SettingsStore, Depends(get_settings_store)]


def _import(request: ImportRequest, settings_store: SettingsStore) -> dict[str, Any]:
    store = ProjectStore(request.project_path)
    if not store.exists():
        raise ProjectNotFoundError(store.root)
    options = ImportOptions(
        use_filename_as_title=request.use_filename_as_title,
        chapter_delimiter=request.chapter_delimiter,
        extract_title_from_delimiter=request.extract_title_from_delimiter,
    )
    result = import_chapters(store, [Path(path) for path in request.file_paths], options)
    store.update_chapter_index(result.chapter_order, result.chapter_titles)
    remember_project(settings_store, store.root)
    return result.model_dump(mode="json", by_alias=True, exclude_none=True)


def _export_dir(store: ProjectStore, request: ExportRequest) -> Path:
    if not store.exists():
        raise ProjectNotFoundError(store.root)
    if request.export_dir:
        store.update_export_dir(request.export_dir)
        return Path(request.export_dir)
    return store.default_export_dir()


def _export_rtf(request: ExportRequest) -> Path:
    store = ProjectStore(request.project_path)
    return export_rtf(store, _export_dir(store, request), request.chapter_ids)


def _export_epub(request: ExportRequest, settings_store: SettingsStore) -> Path:
    store = ProjectStore(request.project_path)
    record = store.load_record()
    font = resolve_font_family(request.font_family or record.font_family, settings_store.load())
    return export_epub(store, _export_dir(store, request), request.chapter_ids, font_family=font)


@router.post("/import", responses=COMMON_PROJECT_RESPONSES)
async def api_import(import_request: ImportRequest, settings_store: SettingsDep) -> dict[str, Any]:
    """Import text and Markdown files into a project.

    **Creates one chapter per section of each supported file** and persists
    the updated chapter order and title map.

    **Returns**

    - **dict**: Created chapters with the full ``chapterOrder`` and ``chapterTitles``

    """
    return await asyncio.to_thread(_import, import_request, settings_store)


@router.post("/export/rtf", response_model=ExportResponse, responses=COMMON_PROJECT_RESPONSES)
async def api_export_rtf(export_request: ExportRequest) -> ExportResponse:
    """Export chapters to a single RTF file and return its path."""
    path = await asyncio.to_thread(_export_rtf, export_request)
    return ExportResponse(path=str(path))


@router.post("/export/epub", response_model=ExportResponse, responses=COMMON_PROJECT_RESPONSES)
async def api_export_epub(export_request: ExportRequest, settings_store: SettingsDep) -> ExportResponse:
    """Export chapters to an EPUB file and return its path."""
    path = await asyncio.to_thread(_export_epub, export_request, settings_store)
    return ExportResponse(path=str(path))


@router.post("/assets", responses=COMMON_PROJECT_RESPONSES)
async def api_add_asset(asset_request: AssetRequest) -> dict[str, str]:
    """Copy an image into the project's assets and return its name and data URL."""
    store = ProjectStore(asset_request.project_path)
    result = await asyncio.to_thread(copy_asset_and_encode, store.assets_dir, Path(asset_request.source_path))
    return result.model_dump(by_alias=True)


@router.put("/chapters/{chapter_id}", responses=COMMON_PROJECT_RESPONSES)
async def api_save_chapter(chapter_id: int, save_request: SaveChapterRequest) -> dict[str, Any]:
    """Validate and store a chapter's document tree.

    **Raises**

    - **422**: The content is not a valid document tree; nothing is written

    """
    store = ProjectStore(save_request.project_path)
    document = await asyncio.to_thread(store.save_chapter, chapter_id, save_request.content)
    return {"id": chapter_id, "content": dump_document(document)}
