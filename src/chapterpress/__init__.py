"""chapterpress: chapter-based manuscripts to document trees, RTF and EPUB."""

from chapterpress.assets import copy_asset_and_encode
from chapterpress.exceptions import (
    ChapterpressError,
    InvalidContentError,
    ProjectNotFoundError,
    RecordParseError,
    StorageError,
)
from chapterpress.export import export_epub, export_rtf
from chapterpress.ingestion import ImportOptions, import_chapters
from chapterpress.markdown import convert_markdown_to_document
from chapterpress.plain_text import convert_text_to_document
from chapterpress.schemas import Document, ImportResult, ProjectRecord
from chapterpress.sections import dedupe_title, split_by_delimiter
from chapterpress.storage import ProjectStore

__all__ = [
    "ChapterpressError",
    "Document",
    "ImportOptions",
    "ImportResult",
    "InvalidContentError",
    "ProjectNotFoundError",
    "ProjectRecord",
    "ProjectStore",
    "RecordParseError",
    "StorageError",
    "convert_markdown_to_document",
    "convert_text_to_document",
    "copy_asset_and_encode",
    "dedupe_title",
    "export_epub",
    "export_rtf",
    "import_chapters",
    "split_by_delimiter",
]
