"""CLI interface for repodump."""

from __future__ import annotations

import asyncio
import signal
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import structlog
import typer
import uvicorn

from repodump import __version__
from repodump.config import ServiceConfig
from repodump.logconfig import configure_logging
from repodump.pipeline import RepoPipeline
from repodump.server import create_app

logger = structlog.get_logger()


class GracefulServer(uvicorn.Server):
    """uvicorn server whose SIGINT/SIGTERM handling ends in a normal return.

    uvicorn re-raises a captured signal after shutdown, which would kill the
    process before the exit status can reflect the shutdown purge.
    """

    @contextmanager
    def capture_signals(self) -> Iterator[None]:
        if threading.current_thread() is not threading.main_thread():
            yield
            return

        old_handlers = {
            sig: signal.signal(sig, self.handle_exit)
            for sig in (signal.SIGINT, signal.SIGTERM)
        }
        try:
            yield
        finally:
            for sig, handler in old_handlers.items():
                signal.signal(sig, handler)


app = typer.Typer(
    name="repodump",
    help="Clone a repository and flatten its source files into one text blob",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"repodump version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """repodump - repository to text."""
    pass


@app.command()
def serve(
    host: Annotated[
        str | None,
        typer.Option("--host", help="Host to bind (default: HOST env var or 0.0.0.0)"),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", "-p", help="Port to bind (default: PORT env var or 3000)"),
    ] = None,
) -> None:
    """Run the HTTP server.

    Exits with status 1 if leftover working copies cannot be purged on shutdown.
    """
    config = ServiceConfig()
    if host:
        config.host = host
    if port:
        config.port = port

    configure_logging(config.log_level, json=config.log_json)

    server_app = create_app(config)
    server = GracefulServer(
        uvicorn.Config(
            server_app,
            host=config.host,
            port=config.port,
            log_level=config.log_level,
        )
    )
    server.run()

    if not server_app.state.shutdown_clean:
        raise typer.Exit(1)


@app.command()
def ingest(
    url: Annotated[str, typer.Argument(help="Repository URL to clone")],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write the blob to this file instead of stdout",
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
) -> None:
    """Run the pipeline once and print the result."""
    config = ServiceConfig()
    # Logs go to stderr so stdout carries only the blob.
    configure_logging(config.log_level, json=config.log_json, file=sys.stderr)

    pipeline = RepoPipeline.from_config(config)
    result = asyncio.run(pipeline.run(url))

    if not result.ok:
        typer.echo(result.error, err=True)
        raise typer.Exit(1)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.content or "", encoding="utf-8", newline="")
        logger.info("Wrote output", path=str(output), file_count=result.file_count)
    else:
        sys.stdout.write(result.content or "")


if __name__ == "__main__":
    app()
