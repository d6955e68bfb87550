"""Import text and Markdown files into a project as new chapters."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from chapterpress.config import MARKDOWN_EXTENSIONS, SUPPORTED_IMPORT_EXTENSIONS
from chapterpress.exceptions import StorageError
from chapterpress.markdown import convert_markdown_to_document
from chapterpress.plain_text import convert_text_to_document
from chapterpress.schemas import Chapter, Document, ImportResult
from chapterpress.sections import default_chapter_title, dedupe_title, split_by_delimiter
from chapterpress.storage import ProjectStore
from chapterpress.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ImportOptions:
    """How imported files are split and titled.

    Attributes:
        use_filename_as_title: Title an unsplit file by its stem.
        chapter_delimiter: Line prefix that starts a new chapter; ``None`` or
            empty keeps each file as one chapter.
        extract_title_from_delimiter: Take chapter titles from the text
            following the delimiter.
    """

    use_filename_as_title: bool = False
    chapter_delimiter: str | None = None
    extract_title_from_delimiter: bool = False


def _file_extension(path: Path) -> str:
    return path.suffix.lstrip(".").lower()


def _convert(content: str, extension: str) -> Document:
    if extension in MARKDOWN_EXTENSIONS:
        return convert_markdown_to_document(content)
    return convert_text_to_document(content)


def _sections_for(path: Path, content: str, options: ImportOptions, next_id: int) -> list[tuple[str, str]]:
    if options.chapter_delimiter:
        return split_by_delimiter(
            content,
            options.chapter_delimiter,
            extract_titles=options.extract_title_from_delimiter,
        )
    if options.use_filename_as_title:
        title = path.stem
    else:
        title = default_chapter_title(next_id)
    return [(title, content)]


def import_chapters(
    store: ProjectStore,
    file_paths: Iterable[Path | str],
    options: ImportOptions | None = None,
) -> ImportResult:
    """Create one chapter per section of each supported file.

    New ids continue after the largest id in the project's chapter order and
    titles are de-duplicated case-insensitively against existing ones. Files
    with unsupported extensions are skipped. Chapter files are written as
    they are created; the returned order and title map are not persisted
    here (see :meth:`ProjectStore.update_chapter_index`).

    Args:
        store: Target project.
        file_paths: Files to import, in order.
        options: Splitting and titling options.

    Returns:
        The created chapters plus the full updated order and title map.

    Raises:
        StorageError: If a file cannot be read or a chapter cannot be written.
            Chapters written before the failure stay on disk.
    """
    options = options or ImportOptions()
    record = store.load_record_or_default()

    chapter_order = list(record.chapter_order)
    chapter_titles = dict(record.chapter_titles)
    next_id = max(chapter_order, default=0) + 1
    used_titles = {title.lower() for title in chapter_titles.values()}
    created: list[Chapter] = []

    for file_path in file_paths:
        path = Path(file_path)
        extension = _file_extension(path)
        if extension not in SUPPORTED_IMPORT_EXTENSIONS:
            logger.debug("Skipping unsupported file", extra={"path": str(path)})
            continue

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError("read", path, exc) from exc

        for raw_title, body in _sections_for(path, content, options, next_id):
            title = dedupe_title(raw_title, used_titles)
            used_titles.add(title.lower())

            document = store.save_chapter(next_id, _convert(body, extension))
            chapter_order.append(next_id)
            chapter_titles[next_id] = title
            created.append(Chapter(id=next_id, title=title, content=document))
            next_id += 1

    logger.info(
        "Imported chapters",
        extra={"project": str(store.root), "chapters_created": len(created)},
    )
    return ImportResult(chapters=created, chapter_order=chapter_order, chapter_titles=chapter_titles)
