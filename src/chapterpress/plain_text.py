"""Convert plain text into a document tree."""

from __future__ import annotations

import re

from chapterpress.schemas.document import Document, Paragraph, Text

_BLANK_LINE_RE = re.compile(r"\n[ \t]*\n")


def convert_text_to_document(text: str) -> Document:
    """Split text into one paragraph per blank-line separated block.

    Paragraphs are trimmed and empty ones dropped; a document with nothing
    left holds a single empty paragraph.
    """
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    paragraphs = [
        Paragraph(content=(Text(text=chunk.strip()),))
        for chunk in _BLANK_LINE_RE.split(normalized)
        if chunk.strip()
    ]
    if not paragraphs:
        return Document.empty()
    return Document(content=tuple(paragraphs))
