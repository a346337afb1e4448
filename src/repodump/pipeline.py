"""Request pipeline: clone, collect, serialize, clean up."""

from __future__ import annotations

import asyncio
from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import structlog

from repodump.config import ServiceConfig
from repodump.exceptions import CleanupError, RepodumpError, ValidationError
from repodump.infra.command import CommandRunner
from repodump.ingest import collect, serialize
from repodump.paths import RequestPaths, generate_request_id
from repodump.workspace.clone import RepoClone

logger = structlog.get_logger()

URL_REQUIRED_MESSAGE = "GitHub URL is required"
FAILURE_PREFIX = "Failed to process repository: "


class PipelineStage(str, Enum):
    """Stages a request moves through."""

    IDLE = "idle"
    RETRIEVING = "retrieving"
    COLLECTING = "collecting"
    SERIALIZING = "serializing"
    CLEANING_UP = "cleaning_up"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineResult:
    """Outcome of one pipeline run.

    Attributes:
        stage: Terminal stage (DONE or FAILED).
        content: Serialized blob on success.
        error: Caller-facing message on failure.
        file_count: Number of files in the blob.
        request_id: Identifier of the request's working copy, if one was allocated.
    """

    stage: PipelineStage
    content: str | None = None
    error: str | None = None
    file_count: int = 0
    request_id: str | None = None

    @property
    def ok(self) -> bool:
        """True if the pipeline produced content."""
        return self.stage == PipelineStage.DONE


class RepoPipeline:
    """Runs one repository through clone, collect, serialize and cleanup.

    Every request clones into its own directory under the work root, and
    that directory is removed exactly once whether the run succeeds or not.

    Example:
        >>> pipeline = RepoPipeline(work_root=Path("/tmp/repodump"))
        >>> result = asyncio.run(pipeline.run("https://github.com/octocat/Hello-World.git"))
        >>> result.ok
        True
    """

    def __init__(
        self,
        work_root: Path,
        cmd: CommandRunner | None = None,
        *,
        clone_depth: int | None = None,
        clone_timeout: float | None = None,
        exclude_dirs: Collection[str] = (),
    ) -> None:
        """Initialize the pipeline.

        Args:
            work_root: Directory under which per-request clones are made.
            cmd: CommandRunner instance.
            clone_depth: Shallow clone depth (None for a full clone).
            clone_timeout: Clone timeout in seconds (None for no limit).
            exclude_dirs: Directory names the collector never descends.
        """
        self.work_root = work_root
        self.cmd = cmd or CommandRunner()
        self.clone_depth = clone_depth
        self.clone_timeout = clone_timeout
        self.exclude_dirs = frozenset(exclude_dirs)

    @classmethod
    def from_config(cls, config: ServiceConfig, cmd: CommandRunner | None = None) -> RepoPipeline:
        """Build a pipeline from service configuration."""
        return cls(
            work_root=config.work_root,
            cmd=cmd,
            clone_depth=config.clone_depth,
            clone_timeout=config.clone_timeout,
            exclude_dirs=config.exclude_dirs,
        )

    async def run(self, url: str | None) -> PipelineResult:
        """Process one repository.

        Args:
            url: Remote repository address. Empty or None is rejected
                before any filesystem change.

        Returns:
            PipelineResult with either content or error set.
        """
        try:
            validate_url(url)
        except ValidationError as e:
            logger.warning("Rejected request", reason=str(e))
            return PipelineResult(stage=PipelineStage.FAILED, error=str(e))

        paths = RequestPaths.create_new(self.work_root, generate_request_id())
        clone = RepoClone(
            paths, self.cmd, depth=self.clone_depth, timeout=self.clone_timeout
        )
        log = logger.bind(request_id=paths.request_id, url=url)
        log.info("Processing repository")

        stage = PipelineStage.IDLE
        content: str | None = None
        file_count = 0
        error: str | None = None

        try:
            stage = PipelineStage.RETRIEVING
            await asyncio.to_thread(clone.fetch, url)

            stage = PipelineStage.COLLECTING
            entries = await asyncio.to_thread(
                collect, clone.path, exclude_dirs=self.exclude_dirs
            )

            stage = PipelineStage.SERIALIZING
            content = serialize(entries)
            file_count = len(entries)
        except RepodumpError as e:
            log.error("Pipeline failed", stage=stage.value, error=str(e))
            error = f"{FAILURE_PREFIX}{e}"
        except Exception as e:
            log.exception("Pipeline failed unexpectedly", stage=stage.value)
            error = f"{FAILURE_PREFIX}{e}"
        finally:
            cleanup_error = await self._cleanup(clone, log)

        if error is None and cleanup_error is not None:
            error = f"{FAILURE_PREFIX}{cleanup_error}"

        if error is not None:
            return PipelineResult(
                stage=PipelineStage.FAILED, error=error, request_id=paths.request_id
            )

        log.info("Repository processed", file_count=file_count)
        return PipelineResult(
            stage=PipelineStage.DONE,
            content=content,
            file_count=file_count,
            request_id=paths.request_id,
        )

    async def _cleanup(
        self, clone: RepoClone, log: structlog.BoundLogger
    ) -> CleanupError | None:
        """Remove the working copy, returning the failure instead of raising it."""
        try:
            await asyncio.to_thread(clone.remove)
        except CleanupError as e:
            log.error("Cleanup failed", stage=PipelineStage.CLEANING_UP.value, error=str(e))
            return e
        return None


def validate_url(url: str | None) -> str:
    """Check that a repository URL was supplied.

    Raises:
        ValidationError: If url is None, empty or only whitespace.
    """
    if not url or not url.strip():
        raise ValidationError(URL_REQUIRED_MESSAGE, field="url")
    return url
