"""Data models for collected source files."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FileEntry:
    """One collected source file.

    Attributes:
        path: Path relative to the collection root, always '/'-separated.
        content: Decoded UTF-8 text of the file.
    """

    path: str
    content: str
