"""Git clone management for per-request working copies."""

from __future__ import annotations

import shutil
from pathlib import Path

import structlog

from repodump.exceptions import CleanupError, CommandError, RetrievalError
from repodump.infra.command import CommandRunner
from repodump.paths import RequestPaths, is_request_id

logger = structlog.get_logger()


class RepoClone:
    """Manages the working copy of a remote repository for one request.

    Each request gets its own clone directory, so concurrent requests never
    share a working copy.

    Example:
        >>> clone = RepoClone(paths, CommandRunner())
        >>> clone.fetch("https://github.com/octocat/Hello-World.git")
        PosixPath('/tmp/repodump/20240101_120000_abc12345')
        >>> clone.remove()
    """

    def __init__(
        self,
        paths: RequestPaths,
        cmd: CommandRunner,
        *,
        depth: int | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the clone manager.

        Args:
            paths: RequestPaths for this request.
            cmd: CommandRunner instance.
            depth: Shallow clone depth (None for a full clone).
            timeout: Clone timeout in seconds (None for no limit).
        """
        self.paths = paths
        self.cmd = cmd
        self.depth = depth
        self.timeout = timeout

    @property
    def path(self) -> Path:
        """Path to the working copy."""
        return self.paths.clone_dir

    def fetch(self, url: str) -> Path:
        """Clone the repository at url into the working copy path.

        The URL is handed to git verbatim.

        Args:
            url: Remote repository address.

        Returns:
            Path to the working copy.

        Raises:
            RetrievalError: If git exits non-zero or cannot be run.
        """
        log = logger.bind(url=url, path=str(self.path))
        log.info("Cloning repository")

        args = ["clone"]
        if self.depth is not None:
            args.extend(["--depth", str(self.depth)])
        args.extend(["--", url, str(self.path)])

        try:
            returncode, _, stderr = self.cmd.run_git(
                args, check=False, timeout=self.timeout
            )
        except CommandError as e:
            log.error("Clone could not run", error=str(e))
            raise RetrievalError(str(e), url=url, path=self.path) from e

        if returncode != 0:
            log.error("Clone failed", returncode=returncode)
            msg = f"git clone exited with code {returncode}: {stderr.strip()}"
            raise RetrievalError(
                msg, url=url, returncode=returncode, path=self.path
            )

        log.info("Repository cloned")
        return self.path

    def remove(self) -> None:
        """Remove the working copy.

        A working copy that does not exist counts as removed.

        Raises:
            CleanupError: If removal fails.
        """
        remove_tree(self.path)

    def exists(self) -> bool:
        """Check if the working copy exists."""
        return self.path.exists()


def remove_tree(path: Path) -> None:
    """Recursively and forcibly remove path.

    Args:
        path: Directory (or file) to remove.

    Raises:
        CleanupError: If the path exists and cannot be removed.
    """
    log = logger.bind(path=str(path))
    log.debug("Removing working copy")

    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except FileNotFoundError:
        log.debug("Path does not exist, nothing to remove")
        return
    except OSError as e:
        log.error("Removal failed", error=str(e))
        msg = f"Failed to remove {path}: {e}"
        raise CleanupError(msg, path=path) from e

    log.debug("Working copy removed")


def purge_work_root(work_root: Path) -> int:
    """Remove working copies left under work_root.

    Only entries named like a request ID are removed; anything else under
    work_root, and work_root itself, is left alone.

    Args:
        work_root: Directory shared by all requests.

    Returns:
        Number of working copies removed.

    Raises:
        CleanupError: If work_root cannot be listed or a working copy cannot be removed.
    """
    log = logger.bind(path=str(work_root))
    log.info("Purging leftover working copies")

    if not work_root.exists():
        return 0

    try:
        leftovers = [child for child in work_root.iterdir() if is_request_id(child.name)]
    except OSError as e:
        log.error("Cannot list work root", error=str(e))
        msg = f"Failed to list {work_root}: {e}"
        raise CleanupError(msg, path=work_root) from e

    for child in leftovers:
        remove_tree(child)

    log.info("Purge complete", removed=len(leftovers))
    return len(leftovers)
