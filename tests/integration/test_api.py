"""Integration tests for the HTTP API."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from repodump.config import ServiceConfig
from repodump.exceptions import CleanupError
from repodump.ingest import FILE_DELIMITER
from repodump.server import create_app


@pytest.fixture
def client(service_config: ServiceConfig) -> Generator[TestClient, None, None]:
    """Create a test client for the app."""
    app = create_app(service_config)
    with TestClient(app) as test_client:
        yield test_client


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    def test_health_returns_ok(self, client: TestClient) -> None:
        """Test that health endpoint returns OK."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestProcessRepo:
    """Tests for POST /process-repo."""

    def test_returns_content(
        self, client: TestClient, tmp_git_repo: Path, work_root: Path
    ) -> None:
        """Test the toy repository end to end."""
        response = client.post("/process-repo", json={"url": str(tmp_git_repo)})

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"content"}
        content = data["content"]
        assert content.count("File: ") == 2
        assert content.count(FILE_DELIMITER) == 2
        assert content.index("File: a.py") < content.index("File: b/c.go")
        assert "README.md" not in content
        assert list(work_root.iterdir()) == []

    @pytest.mark.parametrize("body", [{}, {"url": ""}, {"url": None}, {"other": "x"}])
    def test_missing_url(self, client: TestClient, work_root: Path, body: dict) -> None:
        """Test that a missing URL returns the fixed error without side effects."""
        response = client.post("/process-repo", json=body)

        assert response.status_code == 200
        assert response.json() == {"error": "GitHub URL is required"}
        assert not work_root.exists()

    def test_bad_url_returns_error(
        self, client: TestClient, tmp_path: Path, work_root: Path
    ) -> None:
        """Test that a failed clone is reported as a logical error."""
        response = client.post("/process-repo", json={"url": str(tmp_path / "nowhere")})

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"error"}
        assert data["error"].startswith("Failed to process repository: ")
        assert list(work_root.iterdir()) == []

    def test_extra_fields_ignored(self, client: TestClient, tmp_git_repo: Path) -> None:
        """Test that unknown body fields do not affect the result."""
        response = client.post(
            "/process-repo", json={"url": str(tmp_git_repo), "branch": "main"}
        )

        assert "content" in response.json()


class TestLifecycle:
    """Tests for startup and shutdown behaviour."""

    def test_shutdown_purges_leftover_request_dirs(self, service_config: ServiceConfig) -> None:
        """Test that shutdown removes stale clones but nothing else."""
        stale = service_config.work_root / "20240101_120000_abc12345"
        stale.mkdir(parents=True)
        (stale / "a.py").write_text("x")
        unrelated = service_config.work_root / "keep.txt"
        unrelated.write_text("not ours")

        app = create_app(service_config)
        with TestClient(app):
            pass

        assert not stale.exists()
        assert unrelated.read_text() == "not ours"
        assert app.state.shutdown_clean is True

    def test_shutdown_cleanup_failure_is_recorded(
        self, service_config: ServiceConfig, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that a failed purge marks the shutdown as unclean."""

        def _fail(path: Path) -> None:
            raise CleanupError("denied", path=path)

        monkeypatch.setattr("repodump.server.purge_work_root", _fail)

        app = create_app(service_config)
        with TestClient(app):
            pass

        assert app.state.shutdown_clean is False
