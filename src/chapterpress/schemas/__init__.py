"""Shared schemas for chapterpress."""

from chapterpress.schemas.document import (
    Block,
    Blockquote,
    BoldMark,
    BulletList,
    CodeBlock,
    CodeMark,
    ColorBleed,
    Document,
    HardBreak,
    Heading,
    HorizontalRule,
    ImageBleed,
    Inline,
    ItalicMark,
    ListItem,
    Mark,
    OrderedList,
    Paragraph,
    StrikeMark,
    Text,
    TextStyleMark,
    dump_document,
    load_document,
)
from chapterpress.schemas.project import (
    AssetCopyResult,
    Chapter,
    ImportResult,
    LoadedProject,
    ProjectRecord,
)
from chapterpress.schemas.settings import AppSettings

__all__ = [
    "AppSettings",
    "AssetCopyResult",
    "Block",
    "Blockquote",
    "BoldMark",
    "BulletList",
    "Chapter",
    "CodeBlock",
    "CodeMark",
    "ColorBleed",
    "Document",
    "HardBreak",
    "Heading",
    "HorizontalRule",
    "ImageBleed",
    "ImportResult",
    "Inline",
    "ItalicMark",
    "ListItem",
    "LoadedProject",
    "Mark",
    "OrderedList",
    "Paragraph",
    "ProjectRecord",
    "StrikeMark",
    "Text",
    "TextStyleMark",
    "dump_document",
    "load_document",
]
