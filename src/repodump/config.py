"""Service configuration."""

from __future__ import annotations

import tempfile
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class ServiceConfig(BaseSettings):
    """Configuration for the repodump service.

    Environment variables:
        PORT: Port to bind
        HOST: Host to bind
        REPODUMP_WORK_ROOT: Directory under which per-request clones are made
        REPODUMP_CLONE_DEPTH: Shallow clone depth (unset for a full clone)
        REPODUMP_CLONE_TIMEOUT: Seconds before a clone is abandoned (unset for no limit)
        REPODUMP_EXCLUDE_DIRS: JSON list of directory names never descended
        REPODUMP_LOG_LEVEL: Minimum log level
        REPODUMP_LOG_JSON: Emit JSON log lines instead of console output
    """

    # Server
    host: str = Field(
        default="0.0.0.0",
        validation_alias="HOST",
        description="Host to bind",
    )
    port: int = Field(
        default=3000,
        validation_alias="PORT",
        description="Port to bind",
    )

    # Workspace
    work_root: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()) / "repodump",
        validation_alias="REPODUMP_WORK_ROOT",
        description="Directory under which per-request clones are made",
    )
    clone_depth: int | None = Field(
        default=None,
        validation_alias="REPODUMP_CLONE_DEPTH",
        description="Shallow clone depth, None for a full clone",
    )
    clone_timeout: float | None = Field(
        default=None,
        validation_alias="REPODUMP_CLONE_TIMEOUT",
        description="Clone timeout in seconds, None for no limit",
    )

    # Collection
    exclude_dirs: list[str] = Field(
        default_factory=list,
        validation_alias="REPODUMP_EXCLUDE_DIRS",
        description="Directory names that are never descended",
    )

    # Logging
    log_level: str = Field(
        default="info",
        validation_alias="REPODUMP_LOG_LEVEL",
        description="Minimum log level",
    )
    log_json: bool = Field(
        default=False,
        validation_alias="REPODUMP_LOG_JSON",
        description="Render log lines as JSON",
    )

    model_config = {
        "env_prefix": "",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("clone_depth")
    @classmethod
    def _positive_depth(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("clone_depth must be a positive integer")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.lower()
        if level not in {"debug", "info", "warning", "error", "critical"}:
            raise ValueError(f"Unknown log level: {value}")
        return level
