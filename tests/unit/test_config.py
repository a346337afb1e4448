"""Unit tests for service configuration."""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from repodump.config import ServiceConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate tests from the caller's environment and .env file."""
    for name in [
        "PORT",
        "HOST",
        "REPODUMP_WORK_ROOT",
        "REPODUMP_CLONE_DEPTH",
        "REPODUMP_CLONE_TIMEOUT",
        "REPODUMP_EXCLUDE_DIRS",
        "REPODUMP_LOG_LEVEL",
        "REPODUMP_LOG_JSON",
    ]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults() -> None:
    """Test default values."""
    config = ServiceConfig()

    assert config.port == 3000
    assert config.host == "0.0.0.0"
    assert config.work_root == Path(tempfile.gettempdir()) / "repodump"
    assert config.clone_depth is None
    assert config.clone_timeout is None
    assert config.exclude_dirs == []
    assert config.log_level == "info"
    assert config.log_json is False


def test_port_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that PORT selects the listening port."""
    monkeypatch.setenv("PORT", "8080")

    assert ServiceConfig().port == 8080


def test_invalid_port_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that a non-integer PORT is a validation error."""
    monkeypatch.setenv("PORT", "not-a-port")

    with pytest.raises(ValidationError):
        ServiceConfig()


def test_workspace_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Test workspace and collection settings."""
    monkeypatch.setenv("REPODUMP_WORK_ROOT", str(tmp_path / "clones"))
    monkeypatch.setenv("REPODUMP_CLONE_DEPTH", "1")
    monkeypatch.setenv("REPODUMP_CLONE_TIMEOUT", "30")
    monkeypatch.setenv("REPODUMP_EXCLUDE_DIRS", '[".git", "node_modules"]')

    config = ServiceConfig()

    assert config.work_root == tmp_path / "clones"
    assert config.clone_depth == 1
    assert config.clone_timeout == 30.0
    assert config.exclude_dirs == [".git", "node_modules"]


def test_clone_depth_must_be_positive(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that a zero depth is rejected."""
    monkeypatch.setenv("REPODUMP_CLONE_DEPTH", "0")

    with pytest.raises(ValidationError):
        ServiceConfig()


def test_log_level_normalized(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that log levels are case-insensitive and validated."""
    monkeypatch.setenv("REPODUMP_LOG_LEVEL", "DEBUG")
    assert ServiceConfig().log_level == "debug"

    monkeypatch.setenv("REPODUMP_LOG_LEVEL", "verbose")
    with pytest.raises(ValidationError):
        ServiceConfig()


def test_env_file(tmp_path: Path) -> None:
    """Test that a .env file in the working directory is read."""
    (tmp_path / ".env").write_text("PORT=4100\nREPODUMP_LOG_JSON=true\n")

    config = ServiceConfig()

    assert config.port == 4100
    assert config.log_json is True
