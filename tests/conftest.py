"""Pytest fixtures for repodump tests."""

from __future__ import annotations

import subprocess
import sys
from collections.abc import Iterator
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

import pytest
import structlog

from repodump.config import ServiceConfig
from repodump.infra.command import CommandRunner
from repodump.paths import RequestPaths


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo logging configuration done by CLI commands under test."""
    yield
    structlog.reset_defaults()


def _git(repo: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=repo, check=True, capture_output=True)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository.

    Contains:
    - a.py ("x")
    - b/c.go ("y")
    - README.md (not allow-listed)
    """
    repo = tmp_path / "origin"
    repo.mkdir()

    _git(repo, "init")
    _git(repo, "config", "user.email", "test@test.com")
    _git(repo, "config", "user.name", "Test User")

    (repo / "a.py").write_text("x")
    (repo / "b").mkdir()
    (repo / "b" / "c.go").write_text("y")
    (repo / "README.md").write_text("# Toy repository\n")

    _git(repo, "add", "-A")
    _git(repo, "commit", "-m", "Initial commit")

    return repo


@pytest.fixture
def work_root(tmp_path: Path) -> Path:
    """Work root that does not exist yet."""
    return tmp_path / "work"


@pytest.fixture
def request_paths(work_root: Path) -> RequestPaths:
    """Create RequestPaths for a test request."""
    return RequestPaths.create_new(work_root, "test_request")


@pytest.fixture
def command_runner() -> CommandRunner:
    """Create a CommandRunner instance."""
    return CommandRunner()


@pytest.fixture
def service_config(work_root: Path) -> ServiceConfig:
    """Config pointing at the temporary work root."""
    return ServiceConfig(REPODUMP_WORK_ROOT=work_root, PORT=3999)
