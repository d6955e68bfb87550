"""Configuration for the HTTP service."""

from __future__ import annotations

import os

APP_TITLE = "chapterpress"
APP_DESCRIPTION = "Convert manuscripts to document trees and export projects to RTF and EPUB."

DEFAULT_HOST = os.getenv("HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("PORT", "8000"))
RELOAD = os.getenv("RELOAD", "false").lower() == "true"
