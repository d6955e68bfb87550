"""Render document trees to RTF.

Only top-level paragraphs, headings and blockquotes are written; everything
else is skipped. Bold and italic are reset after every run so adjacent runs
never inherit each other's formatting.
"""

from __future__ import annotations

from typing import Final, Iterable, Sequence

from chapterpress.schemas.document import (
    Blockquote,
    Document,
    HardBreak,
    Heading,
    Inline,
    Paragraph,
    Text,
)

RTF_PREAMBLE: Final[str] = (
    "{\\rtf1\\ansi\\ansicpg1252\\cocoartf2\n"
    "{\\colortbl;\\red255\\green255\\blue255;}\n"
    "{\\*\\expandedcolortbl;;}\n"
    "\\margl1440\\margr1440\\margtsxn0\\margbsxn0\\vieww11900\\viewh8605\\viewkind0\n"
    "\\pard\\tx720\\tx1440\\tx2160\\pardirnatural\\partightenfactor200\n\n"
)

HEADING_FONT_SIZES: Final[dict[int, int]] = {2: 32, 3: 28, 4: 24}
DEFAULT_HEADING_FONT_SIZE: Final[int] = 20
BLOCKQUOTE_INDENT: Final[int] = 720

_CHAPTER_TITLE_SIZE: Final[int] = 28


def escape_rtf(text: str) -> str:
    """Escape RTF control characters and encode non-ASCII as ``\\uN?``."""
    out: list[str] = []
    for char in text:
        if char == "\n":
            out.append("\\line ")
        elif char in "\\{}":
            out.append("\\" + char)
        elif ord(char) < 128:
            out.append(char)
        else:
            encoded = char.encode("utf-16-le")
            for i in range(0, len(encoded), 2):
                unit = int.from_bytes(encoded[i : i + 2], "little", signed=True)
                out.append(f"\\u{unit}?")
    return "".join(out)


def heading_font_size(level: int | None) -> int:
    """Half-point font size used for a heading level."""
    if level is None:
        return DEFAULT_HEADING_FONT_SIZE
    return HEADING_FONT_SIZES.get(level, DEFAULT_HEADING_FONT_SIZE)


def _plain_text(items: Iterable[Inline]) -> str:
    return "".join(escape_rtf(item.text) for item in items if isinstance(item, Text))


def _render_paragraph(paragraph: Paragraph) -> str:
    parts = ["{\\pard "]
    for item in paragraph.content:
        if isinstance(item, HardBreak):
            parts.append("\\line ")
            continue
        if item.has_mark("bold"):
            parts.append("\\b ")
        if item.has_mark("italic"):
            parts.append("\\i ")
        parts.append(escape_rtf(item.text))
        parts.append("\\b0\\i0 ")
    parts.append("\\par}\n")
    return "".join(parts)


def _render_heading(heading: Heading) -> str:
    size = heading_font_size(heading.level)
    return f"{{\\pard \\fs{size} \\b {_plain_text(heading.content)}\\b0\\par}}\n"


def _render_blockquote(blockquote: Blockquote) -> str:
    text = "".join(
        _plain_text(child.content) for child in blockquote.content if isinstance(child, Paragraph)
    )
    return f"{{\\pard \\li{BLOCKQUOTE_INDENT} {text}\\par}}\n"


def render_document(document: Document | None) -> str:
    """Render the body of one chapter, without document header or footer."""
    if document is None:
        return ""
    parts: list[str] = []
    for block in document.content:
        if isinstance(block, Paragraph):
            parts.append(_render_paragraph(block))
        elif isinstance(block, Heading):
            parts.append(_render_heading(block))
        elif isinstance(block, Blockquote):
            parts.append(_render_blockquote(block))
    return "".join(parts)


def render_chapter_header(chapter_id: int) -> str:
    return (
        f"{{\\pard \\fs{_CHAPTER_TITLE_SIZE} \\b Chapter {chapter_id}\\b0\\par}}\n"
        "{\\pard \\par}\n"
        "{\\pard \\par}\n"
    )


def render_rtf(chapters: Sequence[tuple[int, Document | None]]) -> str:
    """Render chapters into one RTF document.

    Each chapter gets a bold ``Chapter <id>`` heading and two blank
    paragraphs; a page break separates chapters but never follows the last.
    """
    parts = [RTF_PREAMBLE]
    for index, (chapter_id, document) in enumerate(chapters):
        parts.append(render_chapter_header(chapter_id))
        parts.append(render_document(document))
        if index < len(chapters) - 1:
            parts.append("\\page\n")
    parts.append("}")
    return "".join(parts)


def rtf_filename(title: str, date_str: str, chapter_ids: Sequence[int], chapter_order: Sequence[int]) -> str:
    """Build ``<Title>_<date>[_Chapters_<ids>].rtf``.

    The chapter suffix is added only when the exported ids are a proper
    subset of the project's chapters.
    """
    base = f"{title.replace(' ', '_')}_{date_str}"
    if set(chapter_ids) >= set(chapter_order):
        return f"{base}.rtf"
    id_range = "-".join(str(chapter_id) for chapter_id in chapter_ids)
    return f"{base}_Chapters_{id_range}.rtf"
