"""Custom exceptions for repodump."""

from pathlib import Path


class RepodumpError(Exception):
    """Base exception for all repodump errors."""

    pass


class ValidationError(RepodumpError):
    """Raised when a request is rejected before any side effect."""

    def __init__(self, message: str, *, field: str = "") -> None:
        super().__init__(message)
        self.field = field


class RetrievalError(RepodumpError):
    """Raised when a repository cannot be cloned."""

    def __init__(
        self,
        message: str,
        *,
        url: str = "",
        returncode: int | None = None,
        path: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.returncode = returncode
        self.path = path


class FileReadError(RepodumpError):
    """Raised when a single collected file cannot be read."""

    def __init__(self, message: str, *, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class CleanupError(RepodumpError):
    """Raised when a working copy cannot be removed."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class CommandError(RepodumpError):
    """Raised when a subprocess command fails."""

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        returncode: int | None = None,
        cwd: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.command = command or []
        self.returncode = returncode
        self.cwd = cwd
