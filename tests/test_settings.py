"""Tests for application settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from chapterpress.exceptions import RecordParseError
from chapterpress.schemas import AppSettings
from chapterpress.settings import (
    JsonSettingsStore,
    remember_project,
    resolve_font_family,
    update_app_font,
)


class InMemorySettingsStore:
    """Settings store double keeping the value in memory."""

    def __init__(self) -> None:
        self.settings = AppSettings()

    def load(self) -> AppSettings:
        return self.settings

    def save(self, settings: AppSettings) -> None:
        self.settings = settings


class TestJsonSettingsStore:
    """Tests for JsonSettingsStore."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        """No file means default settings."""
        settings = JsonSettingsStore(tmp_path / "none.json").load()

        assert settings.font_family is None
        assert settings.last_project_path is None

    def test_save_creates_directory_and_round_trips(self, tmp_path: Path) -> None:
        """Saving creates parent directories and writes camelCase keys."""
        path = tmp_path / "nested" / "config.json"
        store = JsonSettingsStore(path)

        store.save(AppSettings(font_family="Palatino"))

        assert '"fontFamily": "Palatino"' in path.read_text(encoding="utf-8")
        assert store.load().font_family == "Palatino"

    def test_malformed_file_raises(self, tmp_path: Path) -> None:
        """A corrupt settings file is a RecordParseError."""
        path = tmp_path / "config.json"
        path.write_text("[1, 2", encoding="utf-8")

        with pytest.raises(RecordParseError):
            JsonSettingsStore(path).load()

    def test_default_path_from_config(self, settings_path: Path) -> None:
        """Without a path the configured location is used."""
        assert JsonSettingsStore().path == settings_path


class TestSettingsOperations:
    """Tests for the settings helpers."""

    def test_remember_project(self) -> None:
        """The last project path is recorded."""
        store = InMemorySettingsStore()

        remember_project(store, Path("/books/novel"))

        assert store.settings.last_project_path == str(Path("/books/novel"))

    def test_update_app_font(self) -> None:
        """The application font is stored."""
        store = InMemorySettingsStore()

        update_app_font(store, "Baskerville")

        assert store.load().font_family == "Baskerville"

    @pytest.mark.parametrize(
        ("project_font", "app_font", "expected"),
        [("Garamond", "Arial", "Garamond"), (None, "Arial", "Arial"), (None, None, None), ("", "Arial", "Arial")],
    )
    def test_resolve_font_family(self, project_font: str | None, app_font: str | None, expected: str | None) -> None:
        """The project font wins over the application font."""
        assert resolve_font_family(project_font, AppSettings(font_family=app_font)) == expected
