"""Project, chapter and operation result models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from chapterpress.schemas.document import Document


class ProjectRecord(BaseModel):
    """Contents of a project's ``project.json``.

    Attributes:
        title: Project title, used for export filenames and book metadata.
        author: Author name, omitted from book metadata when empty.
        chapter_order: Canonical chapter order.
        chapter_titles: Display title per chapter id.
        export_dir: Last directory used for exports.
        font_family: Preferred body font for exports.

    Fields this model does not know about are kept so a rewrite does not
    drop them.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    title: str
    author: str = ""
    chapter_order: list[int] = Field(default_factory=list, alias="chapterOrder")
    chapter_titles: dict[int, str] = Field(default_factory=dict, alias="chapterTitles")
    export_dir: str | None = Field(default=None, alias="exportDir")
    font_family: str | None = Field(default=None, alias="fontFamily")

    def chapter_title(self, chapter_id: int) -> str:
        return self.chapter_titles.get(chapter_id, f"Chapter {chapter_id}")


class Chapter(BaseModel):
    """A chapter and its tree, if the tree could be loaded."""

    id: int
    title: str
    content: Document | None = None


class LoadedProject(BaseModel):
    project: ProjectRecord
    chapters: list[Chapter]
    path: Path


class ImportResult(BaseModel):
    """Chapters created by an import plus the index the caller should persist."""

    model_config = ConfigDict(populate_by_name=True)

    chapters: list[Chapter]
    chapter_order: list[int] = Field(alias="chapterOrder")
    chapter_titles: dict[int, str] = Field(alias="chapterTitles")


class AssetCopyResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    data_url: str = Field(alias="dataUrl")
