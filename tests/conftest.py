"""Test setup for chapterpress."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from chapterpress.schemas import (  # noqa: E402
    Document,
    Heading,
    ImageBleed,
    Paragraph,
    Text,
)
from chapterpress.schemas.document import HeadingAttrs, ImageBleedAttrs  # noqa: E402
from chapterpress.storage import ProjectStore  # noqa: E402

PNG_BYTES = b"\x89PNG\r\n\x1a\nnot-really-pixels"


def paragraph(text: str) -> Paragraph:
    return Paragraph(content=(Text(text=text),))


@pytest.fixture
def project(tmp_path: Path) -> ProjectStore:
    """An empty project titled "My Book" by "A. Writer"."""
    store = ProjectStore.create(tmp_path / "book", title="My Book")
    store.save_project({"author": "A. Writer"})
    return store


@pytest.fixture
def populated_project(project: ProjectStore) -> ProjectStore:
    """Three chapters (ids 1-3), ordered 2, 1, 3, with an image in chapter 1."""
    project.save_chapter(
        1,
        Document(
            content=(
                Heading(attrs=HeadingAttrs(level=2), content=(Text(text="Opening"),)),
                paragraph("It was a dark night."),
                ImageBleed(attrs=ImageBleedAttrs(name="cover.png", alt="Cover")),
            )
        ),
    )
    project.save_chapter(2, Document(content=(paragraph("Prologue text."),)))
    project.save_chapter(3, Document(content=(paragraph("The end."),)))
    project.update_chapter_index([2, 1, 3], {1: "Night", 2: "Prologue", 3: "Ending"})
    project.assets_dir.mkdir(parents=True, exist_ok=True)
    (project.assets_dir / "cover.png").write_bytes(PNG_BYTES)
    return project


@pytest.fixture
def settings_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the default settings file into the test directory."""
    path = tmp_path / "config" / "settings.json"
    monkeypatch.setattr("chapterpress.settings.CHAPTERPRESS_SETTINGS_PATH", path)
    return path
