"""Application settings backed by an injectable persistence port."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from chapterpress.config import CHAPTERPRESS_SETTINGS_PATH
from chapterpress.exceptions import RecordParseError, StorageError
from chapterpress.schemas import AppSettings


class SettingsStore(Protocol):
    """Where application settings are kept."""

    def load(self) -> AppSettings: ...

    def save(self, settings: AppSettings) -> None: ...


class JsonSettingsStore:
    """Settings kept as a JSON file; a missing file means defaults."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or CHAPTERPRESS_SETTINGS_PATH

    def load(self) -> AppSettings:
        if not self.path.exists():
            return AppSettings()
        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError("read", self.path, exc) from exc
        try:
            return AppSettings.model_validate_json(content)
        except ValidationError as exc:
            raise RecordParseError(f"Failed to parse settings {self.path}: {exc}") from exc

    def save(self, settings: AppSettings) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(settings.model_dump(mode="json", by_alias=True), indent=2),
                encoding="utf-8",
            )
        except OSError as exc:
            raise StorageError("write", self.path, exc) from exc


def remember_project(store: SettingsStore, project_path: Path | str) -> AppSettings:
    """Record ``project_path`` as the last opened project."""
    settings = store.load().model_copy(update={"last_project_path": str(project_path)})
    store.save(settings)
    return settings


def update_app_font(store: SettingsStore, font_family: str) -> AppSettings:
    settings = store.load().model_copy(update={"font_family": font_family})
    store.save(settings)
    return settings


def resolve_font_family(project_font: str | None, settings: AppSettings | None) -> str | None:
    """Project font first, then the application font."""
    if project_font:
        return project_font
    if settings is not None and settings.font_family:
        return settings.font_family
    return None
