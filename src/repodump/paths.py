"""Working directory layout for repodump requests."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

REQUEST_ID_PATTERN = re.compile(r"\d{8}_\d{6}_[0-9a-f]{8}")


def generate_request_id() -> str:
    """Generate a unique request ID with timestamp prefix.

    Returns:
        A request ID in format: YYYYMMDD_HHMMSS_<short-uuid>

    Example:
        >>> request_id = generate_request_id()
        >>> len(request_id) > 20
        True
    """
    ts = datetime.now(tz=UTC).strftime("%Y%m%d_%H%M%S")
    short_uuid = uuid.uuid4().hex[:8]
    return f"{ts}_{short_uuid}"


def is_request_id(name: str) -> bool:
    """Check whether name has the shape produced by generate_request_id."""
    return REQUEST_ID_PATTERN.fullmatch(name) is not None


@dataclass(frozen=True)
class RequestPaths:
    """Filesystem locations owned by a single request.

    Attributes:
        work_root: Directory shared by all requests.
        request_id: Unique identifier for this request.

    Example:
        >>> paths = RequestPaths(Path("/tmp/repodump"), "20240101_120000_abc12345")
        >>> paths.clone_dir.name
        '20240101_120000_abc12345'
    """

    work_root: Path
    request_id: str

    @property
    def clone_dir(self) -> Path:
        """Clone target for this request."""
        return self.work_root / self.request_id

    @classmethod
    def create_new(cls, work_root: Path, request_id: str | None = None) -> RequestPaths:
        """Allocate paths for a new request.

        The work root is created if needed; the clone directory is not, since
        git refuses to clone into a non-empty directory and creates it itself.

        Args:
            work_root: Directory shared by all requests.
            request_id: Optional explicit request ID.

        Returns:
            RequestPaths for the new request.
        """
        work_root.mkdir(parents=True, exist_ok=True)
        return cls(work_root=work_root, request_id=request_id or generate_request_id())
