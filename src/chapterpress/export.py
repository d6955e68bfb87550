"""Render a project's chapters to RTF or EPUB files."""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Sequence

from chapterpress.epub import EpubChapter, build_epub, epub_filename
from chapterpress.exceptions import StorageError
from chapterpress.identifiers import date_stamp
from chapterpress.rtf import render_rtf, rtf_filename
from chapterpress.storage import ProjectStore
from chapterpress.utils.logging_config import get_logger

logger = get_logger(__name__)


def resolve_export_ids(chapter_order: Sequence[int], chapter_ids: Sequence[int]) -> list[int]:
    """Filter ``chapter_ids`` to the canonical order; empty means everything."""
    if not chapter_ids:
        return list(chapter_order)
    wanted = set(chapter_ids)
    return [chapter_id for chapter_id in chapter_order if chapter_id in wanted]


def _write_bytes(path: Path, data: bytes) -> Path:
    try:
        path.write_bytes(data)
    except OSError as exc:
        raise StorageError("write", path, exc) from exc
    return path


def export_rtf(
    store: ProjectStore,
    export_dir: Path | str,
    chapter_ids: Sequence[int] = (),
    today: date | None = None,
) -> Path:
    """Write the chapters to one RTF file in ``export_dir``.

    Chapters are written in the order given; an empty selection exports the
    whole project in canonical order. Chapters without a chapter file are
    left out entirely, unparsable ones render with an empty body.

    Returns:
        Path of the written file.
    """
    record = store.load_record()
    ids = list(chapter_ids) or list(record.chapter_order)

    chapters = [
        (chapter_id, store.load_chapter(chapter_id))
        for chapter_id in ids
        if store.chapter_exists(chapter_id)
    ]
    content = render_rtf(chapters)

    filename = rtf_filename(record.title, date_stamp(today), ids, record.chapter_order)
    path = _write_bytes(Path(export_dir) / filename, content.encode("utf-8"))
    logger.info("Exported RTF", extra={"path": str(path), "chapters": len(chapters)})
    return path


def export_epub(
    store: ProjectStore,
    export_dir: Path | str,
    chapter_ids: Sequence[int] = (),
    font_family: str | None = None,
    now: datetime | None = None,
) -> Path:
    """Write the chapters to an EPUB file in ``export_dir``.

    The selection is filtered to, and ordered by, the project's canonical
    order. ``font_family`` overrides the project font for the stylesheet.

    Returns:
        Path of the written file.
    """
    record = store.load_record()
    ids = resolve_export_ids(record.chapter_order, chapter_ids)
    chapters = [
        EpubChapter(title=record.chapter_title(chapter_id), document=store.load_chapter(chapter_id))
        for chapter_id in ids
    ]

    data = build_epub(
        record.title,
        record.author,
        chapters,
        store.assets_dir,
        font_family=font_family or record.font_family,
        now=now,
    )

    today = now.date() if now is not None else None
    path = _write_bytes(Path(export_dir) / epub_filename(record.title, today), data)
    logger.info("Exported EPUB", extra={"path": str(path), "chapters": len(chapters)})
    return path
