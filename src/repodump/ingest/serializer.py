"""Serialization of collected files into a single text blob."""

from __future__ import annotations

from collections.abc import Iterable

from repodump.ingest.models import FileEntry

FILE_DELIMITER = "\n===== FILE DELIMITER =====\n"


def format_entry(entry: FileEntry) -> str:
    """Render one file record, delimiter included."""
    return f"File: {entry.path}\n\n{entry.content}\n{FILE_DELIMITER}"


def serialize(entries: Iterable[FileEntry]) -> str:
    """Concatenate file records in the given order.

    Args:
        entries: Collected files, normally already sorted by path.

    Returns:
        The joined records, or an empty string when there are none.
    """
    return "".join(format_entry(entry) for entry in entries)
