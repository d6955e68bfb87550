"""Local configuration for chapterpress."""

from __future__ import annotations

import os
from pathlib import Path


DEFAULT_SETTINGS_PATH = "~/.config/chapterpress/config.json"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_EPUB_LANGUAGE = "en"

PROJECT_FILENAME = "project.json"
CHAPTERS_DIRNAME = "chapters"
ASSETS_DIRNAME = "assets"

SUPPORTED_IMPORT_EXTENSIONS = frozenset({"txt", "md"})
MARKDOWN_EXTENSIONS = frozenset({"md"})

# Application settings (font, last opened project) live outside any project.
CHAPTERPRESS_SETTINGS_PATH = Path(os.getenv("CHAPTERPRESS_SETTINGS_PATH", DEFAULT_SETTINGS_PATH)).expanduser()
CHAPTERPRESS_LOG_LEVEL = os.getenv("CHAPTERPRESS_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
CHAPTERPRESS_EPUB_LANGUAGE = os.getenv("CHAPTERPRESS_EPUB_LANGUAGE", DEFAULT_EPUB_LANGUAGE)
