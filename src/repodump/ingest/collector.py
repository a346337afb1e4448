"""Recursive collection of allow-listed source files."""

from __future__ import annotations

from collections.abc import Collection
from operator import attrgetter
from pathlib import Path

import structlog

from repodump.exceptions import FileReadError
from repodump.ingest.models import FileEntry

logger = structlog.get_logger()

ALLOWED_EXTENSIONS: frozenset[str] = frozenset(
    {
        ".py",
        ".js",
        ".jsx",
        ".tsx",
        ".ts",
        ".html",
        ".css",
        ".java",
        ".cpp",
        ".c",
        ".go",
    }
)


def collect(
    root: Path,
    *,
    extensions: Collection[str] = ALLOWED_EXTENSIONS,
    exclude_dirs: Collection[str] = (),
) -> list[FileEntry]:
    """Collect the text of every allow-listed file under root.

    Directories are descended depth-first; symlinked directories are not
    followed. A file matches when its suffix, compared case-sensitively and
    including the leading dot, is in extensions. Files that cannot be read
    or decoded, and symlinks whose target lies outside root, are logged and
    skipped.

    Args:
        root: Directory to walk.
        extensions: Allowed file suffixes.
        exclude_dirs: Directory names that are never descended.

    Returns:
        Entries sorted by relative path.
    """
    log = logger.bind(root=str(root))
    log.debug("Collecting source files")

    entries: list[FileEntry] = []
    _walk(root, root, root.resolve(), entries, extensions, exclude_dirs)
    entries.sort(key=attrgetter("path"))

    log.info("Collected source files", count=len(entries))
    return entries


def _walk(
    directory: Path,
    root: Path,
    resolved_root: Path,
    entries: list[FileEntry],
    extensions: Collection[str],
    exclude_dirs: Collection[str],
) -> None:
    for child in directory.iterdir():
        if child.is_dir() and not child.is_symlink():
            if child.name in exclude_dirs:
                continue
            _walk(child, root, resolved_root, entries, extensions, exclude_dirs)
        elif child.suffix in extensions:
            rel_path = child.relative_to(root).as_posix()
            try:
                content = read_source(child, rel_path, within=resolved_root)
            except FileReadError as e:
                logger.warning("Skipping unreadable file", path=e.path, error=str(e))
                continue
            entries.append(FileEntry(path=rel_path, content=content))


def read_source(path: Path, rel_path: str, *, within: Path | None = None) -> str:
    """Read a file as UTF-8 text, keeping its line endings untouched.

    Args:
        path: File to read.
        rel_path: Path reported in errors.
        within: Resolved directory a symlinked path must point into.

    Raises:
        FileReadError: If the file cannot be opened, is not valid UTF-8, or
            is a symlink leaving within.
    """
    if within is not None and path.is_symlink():
        try:
            target = path.resolve()
        except (OSError, RuntimeError) as e:
            raise FileReadError(f"Cannot resolve {rel_path}: {e}", path=rel_path) from e
        if not target.is_relative_to(within):
            raise FileReadError(
                f"Symlink {rel_path} points outside the repository", path=rel_path
            )

    try:
        return path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(f"Cannot read {rel_path}: {e}", path=rel_path) from e
