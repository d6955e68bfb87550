"""Tests for the HTTP service."""

from __future__ import annotations

import importlib
import zipfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from chapterpress.schemas import AppSettings
from chapterpress.storage import ProjectStore
from conftest import PNG_BYTES
from server import server_config
from server.main import app
from server.routers.projects import get_settings_store


class InMemorySettingsStore:
    def __init__(self, settings: AppSettings | None = None) -> None:
        self.settings = settings or AppSettings()

    def load(self) -> AppSettings:
        return self.settings

    def save(self, settings: AppSettings) -> None:
        self.settings = settings


@pytest.fixture
def settings_store() -> InMemorySettingsStore:
    return InMemorySettingsStore(AppSettings(font_family="Baskerville"))


@pytest.fixture
def client(settings_store: InMemorySettingsStore):
    app.dependency_overrides[get_settings_store] = lambda: settings_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestHealthAndConvert:
    """Tests for the stateless endpoints."""

    def test_health(self, client: TestClient) -> None:
        """Health check reports healthy."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_convert_markdown(self, client: TestClient) -> None:
        """Markdown converts to the persisted tree shape."""
        response = client.post("/api/convert/markdown", json={"text": "**hi**"})

        assert response.status_code == 200
        run = response.json()["document"]["content"][0]["content"][0]
        assert run == {"type": "text", "text": "hi", "marks": [{"type": "bold"}]}

    def test_convert_text(self, client: TestClient) -> None:
        """Plain text converts to paragraphs."""
        response = client.post("/api/convert/text", json={"text": "a\n\nb"})

        content = response.json()["document"]["content"]
        assert [para["content"][0]["text"] for para in content] == ["a", "b"]


class TestProjectEndpoints:
    """Tests for the project endpoints."""

    def test_import_persists_index(
        self,
        client: TestClient,
        project: ProjectStore,
        tmp_path: Path,
        settings_store: InMemorySettingsStore,
    ) -> None:
        """Imported chapters are written and the index is saved."""
        source = tmp_path / "draft.md"
        source.write_text("# One\n\ntext", encoding="utf-8")

        response = client.post(
            "/api/projects/import",
            json={"project_path": str(project.root), "file_paths": [str(source)], "use_filename_as_title": True},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["chapterOrder"] == [1]
        assert body["chapterTitles"] == {"1": "draft"}
        assert project.load_record().chapter_titles == {1: "draft"}
        assert settings_store.settings.last_project_path == str(project.root)

    def test_import_into_missing_project_is_404(self, client: TestClient, tmp_path: Path) -> None:
        """Missing projects map to 404 with an error body."""
        response = client.post("/api/projects/import", json={"project_path": str(tmp_path / "nope")})

        assert response.status_code == 404
        assert "error" in response.json()

    def test_export_rtf(self, client: TestClient, populated_project: ProjectStore, tmp_path: Path) -> None:
        """RTF export writes into the requested directory and remembers it."""
        out = tmp_path / "exports"
        out.mkdir()

        response = client.post(
            "/api/projects/export/rtf",
            json={"project_path": str(populated_project.root), "export_dir": str(out)},
        )

        assert response.status_code == 200
        path = Path(response.json()["path"])
        assert path.parent == out
        assert path.suffix == ".rtf"
        assert populated_project.default_export_dir() == out

    def test_export_epub_uses_application_font(
        self,
        client: TestClient,
        populated_project: ProjectStore,
        tmp_path: Path,
    ) -> None:
        """Without a project font the application font styles the book."""
        response = client.post(
            "/api/projects/export/epub",
            json={"project_path": str(populated_project.root), "export_dir": str(tmp_path)},
        )

        assert response.status_code == 200
        with zipfile.ZipFile(response.json()["path"]) as archive:
            assert '"Baskerville"' in archive.read("OEBPS/style.css").decode("utf-8")

    def test_export_missing_project_is_404(self, client: TestClient, tmp_path: Path) -> None:
        """Exports of unknown projects are 404."""
        response = client.post("/api/projects/export/epub", json={"project_path": str(tmp_path / "nope")})

        assert response.status_code == 404

    def test_malformed_record_is_422(self, client: TestClient, tmp_path: Path) -> None:
        """A corrupt project.json maps to 422."""
        (tmp_path / "project.json").write_text("{oops", encoding="utf-8")

        response = client.post("/api/projects/export/rtf", json={"project_path": str(tmp_path)})

        assert response.status_code == 422
        assert "error" in response.json()

    def test_add_asset(self, client: TestClient, project: ProjectStore, tmp_path: Path) -> None:
        """Assets are copied and returned as data URLs."""
        source = tmp_path / "pic.png"
        source.write_bytes(PNG_BYTES)

        response = client.post(
            "/api/projects/assets",
            json={"project_path": str(project.root), "source_path": str(source)},
        )

        assert response.status_code == 200
        assert response.json()["name"] == "pic.png"
        assert response.json()["dataUrl"].startswith("data:image/png;base64,")

    def test_add_missing_asset_is_500(self, client: TestClient, project: ProjectStore, tmp_path: Path) -> None:
        """Filesystem failures map to 500."""
        response = client.post(
            "/api/projects/assets",
            json={"project_path": str(project.root), "source_path": str(tmp_path / "nope.png")},
        )

        assert response.status_code == 500
        assert "nope.png" in response.json()["error"]

    def test_save_chapter(self, client: TestClient, project: ProjectStore) -> None:
        """Valid trees are stored."""
        content = {"type": "doc", "content": [{"type": "paragraph", "content": [{"type": "text", "text": "x"}]}]}

        response = client.put("/api/projects/chapters/4", json={"project_path": str(project.root), "content": content})

        assert response.status_code == 200
        assert project.load_chapter(4).content[0].content[0].text == "x"

    def test_save_invalid_chapter_is_422(self, client: TestClient, project: ProjectStore) -> None:
        """Invalid trees are rejected and nothing is written."""
        content = {"type": "doc", "content": [{"type": "mystery"}]}

        response = client.put("/api/projects/chapters/4", json={"project_path": str(project.root), "content": content})

        assert response.status_code == 422
        assert "error" in response.json()
        assert not project.chapter_exists(4)


class TestAssetSafety:
    """Tests that the asset endpoint only copies images."""

    def test_non_image_source_is_422(self, client: TestClient, project: ProjectStore, tmp_path: Path) -> None:
        """Files without an image extension are rejected before anything is read."""
        source = tmp_path / "secret.txt"
        source.write_text("do not copy", encoding="utf-8")

        response = client.post(
            "/api/projects/assets",
            json={"project_path": str(project.root), "source_path": str(source)},
        )

        assert response.status_code == 422
        assert not (project.assets_dir / "secret.txt").exists()

    def test_extension_check_ignores_case(self, client: TestClient, project: ProjectStore, tmp_path: Path) -> None:
        """Upper-case image extensions are accepted."""
        source = tmp_path / "PIC.PNG"
        source.write_bytes(PNG_BYTES)

        response = client.post(
            "/api/projects/assets",
            json={"project_path": str(project.root), "source_path": str(source)},
        )

        assert response.status_code == 200
        assert response.json()["name"] == "PIC.PNG"

    def test_default_host_is_loopback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without HOST set the service only listens on localhost."""
        monkeypatch.delenv("HOST", raising=False)

        config = importlib.reload(server_config)

        assert config.DEFAULT_HOST == "127.0.0.1"
