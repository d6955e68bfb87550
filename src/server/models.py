"""Pydantic models for the HTTP API."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from chapterpress.assets import IMAGE_MIME_TYPES


class ConvertRequest(BaseModel):
    """Request model for the /api/convert endpoints.

    Attributes
    ----------
    text : str
        Plain text or Markdown to convert.

    """

    text: str = Field(..., description="Text to convert")


class ConvertResponse(BaseModel):
    """Document tree produced by a conversion.

    Attributes
    ----------
    document : dict
        The tree in its persisted JSON shape.

    """

    document: dict[str, Any] = Field(..., description="Document tree")


class ProjectRequest(BaseModel):
    """Base for requests that act on a project directory.

    Attributes
    ----------
    project_path : str
        Directory holding ``project.json``.

    """

    project_path: str = Field(..., description="Project directory")

    @field_validator("project_path")
    @classmethod
    def validate_project_path(cls, v: str) -> str:
        """Validate that ``project_path`` is not empty."""
        if not v.strip():
            err = "project_path cannot be empty"
            raise ValueError(err)
        return v.strip()


class ImportRequest(ProjectRequest):
    """Request model for the /api/projects/import endpoint.

    Attributes
    ----------
    file_paths : list[str]
        Files to import, in order. Unsupported extensions are skipped.
    use_filename_as_title : bool
        Title unsplit files by their filename.
    chapter_delimiter : str | None
        Line prefix that starts a new chapter.
    extract_title_from_delimiter : bool
        Take chapter titles from delimiter lines.

    """

    file_paths: list[str] = Field(default_factory=list, description="Files to import")
    use_filename_as_title: bool = Field(default=False, description="Title files by filename")
    chapter_delimiter: str | None = Field(default=None, description="Chapter delimiter prefix")
    extract_title_from_delimiter: bool = Field(default=False, description="Take titles from delimiter lines")

    @field_validator("chapter_delimiter")
    @classmethod
    def normalize_delimiter(cls, v: str | None) -> str | None:
        """Treat an empty delimiter as no delimiter."""
        return v or None


class ExportRequest(ProjectRequest):
    """Request model for the /api/projects/export endpoints.

    Attributes
    ----------
    export_dir : str | None
        Output directory; the project's saved export directory when omitted.
    chapter_ids : list[int]
        Chapters to export; empty exports every chapter.
    font_family : str | None
        Body font override (EPUB only).

    """

    export_dir: str | None = Field(default=None, description="Output directory")
    chapter_ids: list[int] = Field(default_factory=list, description="Chapter ids to export")
    font_family: str | None = Field(default=None, description="Body font override")


class ExportResponse(BaseModel):
    """Path of a written export file."""

    path: str = Field(..., description="Written file")


class AssetRequest(ProjectRequest):
    """Request model for the /api/projects/assets endpoint.

    Attributes
    ----------
    source_path : str
        Image file to copy into the project's assets.

    """

    source_path: str = Field(..., description="Image to copy")

    @field_validator("source_path")
    @classmethod
    def validate_image_extension(cls, v: str) -> str:
        """Only accept files with a known image extension."""
        if Path(v).suffix.lstrip(".").lower() not in IMAGE_MIME_TYPES:
            err = f"source_path must be an image ({', '.join(sorted(IMAGE_MIME_TYPES))})"
            raise ValueError(err)
        return v


class SaveChapterRequest(ProjectRequest):
    """Request model for PUT /api/projects/chapters/{chapter_id}.

    Attributes
    ----------
    content : dict
        Document tree in its persisted JSON shape.

    """

    content: dict[str, Any] = Field(..., description="Document tree")


class ErrorResponse(BaseModel):
    """Error response model.

    Attributes
    ----------
    error : str
        Error message describing what went wrong.

    """

    error: str = Field(..., description="Error message")
