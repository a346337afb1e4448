"""Subprocess command runner with logging."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

import structlog

from repodump.exceptions import CommandError

logger = structlog.get_logger()


class CommandRunner:
    """Runs subprocess commands with consistent logging.

    All subprocess calls in repodump should go through this class to ensure
    consistent logging and error handling.

    Example:
        >>> runner = CommandRunner()
        >>> runner.run_capture(["echo", "hello"])
        (0, 'hello\\n', '')
    """

    def run_capture(
        self,
        command: list[str],
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
        check: bool = False,
        env: dict[str, str] | None = None,
    ) -> tuple[int, str, str]:
        """Run a command and capture stdout/stderr in memory.

        Args:
            command: Command and arguments to run.
            cwd: Working directory for the command.
            timeout: Timeout in seconds.
            check: If True, raise on non-zero exit code.
            env: Environment variables (merged with current env).

        Returns:
            Tuple of (returncode, stdout, stderr).

        Raises:
            CommandError: If command cannot be started or times out, or if check=True and command fails.
        """
        log = logger.bind(command=command, cwd=str(cwd) if cwd else None)
        log.debug("Running command")

        full_env = os.environ.copy()
        if env:
            full_env.update(env)

        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=timeout,
                env=full_env,
                check=False,
            )
            log.debug("Command completed", returncode=result.returncode)

            if check and result.returncode != 0:
                msg = f"Command failed with exit code {result.returncode}: {' '.join(command)}"
                raise CommandError(
                    msg,
                    command=command,
                    returncode=result.returncode,
                    cwd=cwd,
                )

            return result.returncode, result.stdout, result.stderr
        except subprocess.TimeoutExpired as e:
            log.error("Command timed out", timeout=timeout)
            msg = f"Command timed out after {timeout}s: {' '.join(command)}"
            raise CommandError(msg, command=command, cwd=cwd) from e
        except FileNotFoundError as e:
            log.error("Command not found", command=command[0])
            msg = f"Command not found: {command[0]}"
            raise CommandError(msg, command=command, cwd=cwd) from e

    def run_git(
        self,
        args: list[str],
        *,
        cwd: Path | None = None,
        check: bool = True,
        timeout: float | None = None,
    ) -> tuple[int, str, str]:
        """Run a git command.

        Interactive credential prompts are disabled so that a repository
        requiring authentication fails instead of blocking.

        Args:
            args: Git subcommand and arguments.
            cwd: Working directory.
            check: If True, raise on non-zero exit code.
            timeout: Timeout in seconds.

        Returns:
            Tuple of (returncode, stdout, stderr).
        """
        return self.run_capture(
            ["git", *args],
            cwd=cwd,
            check=check,
            timeout=timeout,
            env={"GIT_TERMINAL_PROMPT": "0"},
        )
