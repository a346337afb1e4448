"""Source collection and serialization."""

from repodump.ingest.collector import ALLOWED_EXTENSIONS, collect
from repodump.ingest.models import FileEntry
from repodump.ingest.serializer import FILE_DELIMITER, serialize

__all__ = ["ALLOWED_EXTENSIONS", "FILE_DELIMITER", "FileEntry", "collect", "serialize"]
