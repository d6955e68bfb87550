"""Filesystem storage for projects, chapters and assets.

Layout of a project directory::

    project.json        title, author, chapterOrder, chapterTitles, ...
    chapters/<id>.json  one document tree per chapter
    assets/             imported images
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from pydantic import ValidationError

from chapterpress.config import ASSETS_DIRNAME, CHAPTERS_DIRNAME, PROJECT_FILENAME
from chapterpress.exceptions import (
    InvalidContentError,
    ProjectNotFoundError,
    RecordParseError,
    StorageError,
)
from chapterpress.schemas import Chapter, Document, LoadedProject, ProjectRecord, dump_document, load_document
from chapterpress.utils.logging_config import get_logger

logger = get_logger(__name__)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise StorageError("read", path, exc) from exc


def _write_json(path: Path, data: Any) -> None:
    try:
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as exc:
        raise StorageError("write", path, exc) from exc


def _mkdir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageError("create directory", path, exc) from exc


class ProjectStore:
    """Read and write one project directory."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    @property
    def project_file(self) -> Path:
        return self.root / PROJECT_FILENAME

    @property
    def chapters_dir(self) -> Path:
        return self.root / CHAPTERS_DIRNAME

    @property
    def assets_dir(self) -> Path:
        return self.root / ASSETS_DIRNAME

    def chapter_file(self, chapter_id: int) -> Path:
        return self.chapters_dir / f"{chapter_id}.json"

    @classmethod
    def create(cls, root: Path | str, title: str) -> ProjectStore:
        """Create the directory layout and an empty project record."""
        store = cls(root)
        _mkdir(store.chapters_dir)
        store.write_record(ProjectRecord(title=title))
        return store

    def exists(self) -> bool:
        return self.project_file.is_file()

    # Project record

    def read_raw(self) -> dict[str, Any]:
        """Return ``project.json`` as a plain dict.

        Raises:
            ProjectNotFoundError: If the file is missing.
            StorageError: If it cannot be read.
            RecordParseError: If it is not a JSON object.
        """
        if not self.exists():
            raise ProjectNotFoundError(self.root)
        content = _read_text(self.project_file)
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise RecordParseError(f"Failed to parse {self.project_file}: {exc}") from exc
        if not isinstance(data, dict):
            raise RecordParseError(f"Failed to parse {self.project_file}: expected a JSON object")
        return data

    def load_record(self) -> ProjectRecord:
        data = self.read_raw()
        try:
            return ProjectRecord.model_validate(data)
        except ValidationError as exc:
            raise RecordParseError(f"Failed to parse project record {self.project_file}: {exc}") from exc

    def load_record_or_default(self) -> ProjectRecord:
        """Like :meth:`load_record`, but a missing file yields a fresh record."""
        if not self.exists():
            return ProjectRecord(title="Project")
        return self.load_record()

    def write_record(self, record: ProjectRecord) -> None:
        _mkdir(self.root)
        _write_json(self.project_file, record.model_dump(mode="json", by_alias=True, exclude_none=True))

    def save_project(self, updates: Mapping[str, Any]) -> ProjectRecord:
        """Merge ``updates`` (persisted key names) into ``project.json``.

        Keys not present in ``updates`` are kept as they are on disk.
        """
        merged = self.read_raw() if self.exists() else {}
        merged.update(updates)
        try:
            record = ProjectRecord.model_validate(merged)
        except ValidationError as exc:
            raise RecordParseError(f"Invalid project record for {self.project_file}: {exc}") from exc
        _mkdir(self.root)
        _write_json(self.project_file, merged)
        return record

    def update_chapter_index(self, chapter_order: list[int], chapter_titles: Mapping[int, str]) -> ProjectRecord:
        return self.save_project(
            {
                "chapterOrder": list(chapter_order),
                "chapterTitles": {str(key): value for key, value in chapter_titles.items()},
            }
        )

    def rename_chapter(self, chapter_id: int, title: str) -> ProjectRecord:
        titles = {str(key): value for key, value in self.load_record().chapter_titles.items()}
        titles[str(chapter_id)] = title
        return self.save_project({"chapterTitles": titles})

    def update_export_dir(self, export_dir: Path | str) -> ProjectRecord:
        return self.save_project({"exportDir": str(export_dir)})

    def update_font(self, font_family: str) -> ProjectRecord:
        return self.save_project({"fontFamily": font_family})

    def default_export_dir(self) -> Path:
        """The saved export directory, else the directory holding the project."""
        if self.exists():
            record = self.load_record()
            if record.export_dir:
                return Path(record.export_dir)
        return self.root.resolve().parent

    # Chapters

    def chapter_exists(self, chapter_id: int) -> bool:
        return self.chapter_file(chapter_id).is_file()

    def load_chapter(self, chapter_id: int) -> Document | None:
        """Load a chapter tree.

        A missing or unparsable chapter file yields ``None``; read failures
        still raise :class:`StorageError`.
        """
        path = self.chapter_file(chapter_id)
        if not path.is_file():
            return None
        content = _read_text(path)
        try:
            return load_document(content)
        except ValidationError as exc:
            logger.warning(
                "Unparsable chapter treated as empty",
                extra={"chapter_id": chapter_id, "path": str(path), "error": str(exc)},
            )
            return None

    def save_chapter(self, chapter_id: int, content: Document | Mapping[str, Any] | str) -> Document:
        """Validate and write a chapter tree.

        Raw JSON and mappings are written as given once they validate, so
        attributes the tree model does not know about stay on disk.

        Raises:
            InvalidContentError: If ``content`` is not a valid document; nothing
                is written in that case.
        """
        if isinstance(content, Document):
            document = content
            payload: Any = dump_document(document)
        else:
            try:
                payload = json.loads(content) if isinstance(content, str) else dict(content)
                document = load_document(payload)
            except (json.JSONDecodeError, ValidationError) as exc:
                raise InvalidContentError(f"Invalid content for chapter {chapter_id}: {exc}") from exc
        _mkdir(self.chapters_dir)
        _write_json(self.chapter_file(chapter_id), payload)
        return document

    def delete_chapter(self, chapter_id: int) -> None:
        """Remove a chapter file and its entries in the project record."""
        path = self.chapter_file(chapter_id)
        if path.exists():
            try:
                path.unlink()
            except OSError as exc:
                raise StorageError("delete", path, exc) from exc
        if not self.exists():
            return
        record = self.load_record()
        self.save_project(
            {
                "chapterOrder": [cid for cid in record.chapter_order if cid != chapter_id],
                "chapterTitles": {
                    str(cid): title for cid, title in record.chapter_titles.items() if cid != chapter_id
                },
            }
        )

    def load_project(self) -> LoadedProject:
        """Load the record and every chapter file.

        Chapters follow the canonical order; files whose id is not in the
        order come last, by id.
        """
        record = self.load_record()
        chapters: list[Chapter] = []
        if self.chapters_dir.is_dir():
            for path in sorted(self.chapters_dir.glob("*.json")):
                if not path.stem.isdigit():
                    continue
                chapter_id = int(path.stem)
                chapters.append(
                    Chapter(
                        id=chapter_id,
                        title=record.chapter_title(chapter_id),
                        content=self.load_chapter(chapter_id),
                    )
                )

        positions = {chapter_id: index for index, chapter_id in enumerate(record.chapter_order)}
        chapters.sort(key=lambda ch: (positions.get(ch.id, len(positions)), ch.id))
        return LoadedProject(project=record, chapters=chapters, path=self.root)
