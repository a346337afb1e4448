"""FastAPI application for repodump."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from repodump import __version__
from repodump.config import ServiceConfig
from repodump.exceptions import CleanupError
from repodump.handlers import api_router
from repodump.pipeline import RepoPipeline
from repodump.workspace.clone import purge_work_root

logger = structlog.get_logger()


def create_app(
    config: ServiceConfig | None = None,
    pipeline: RepoPipeline | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        config: Optional configuration. If not provided, loads from env.
        pipeline: Optional pipeline. If not provided, built from config.

    Returns:
        Configured FastAPI application.
    """
    if config is None:
        config = ServiceConfig()
    if pipeline is None:
        pipeline = RepoPipeline.from_config(config)

    app = FastAPI(
        title="repodump",
        description="Clone a repository and return its source files as one text blob",
        version=__version__,
        docs_url="/docs",
        redoc_url=None,
    )

    app.state.config = config
    app.state.pipeline = pipeline
    # Set to False when the shutdown purge fails; read by the launcher for the exit code.
    app.state.shutdown_clean = True

    app.include_router(api_router)

    @app.exception_handler(Exception)
    async def unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        """Log anything that escaped a handler and answer with the error payload."""
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse({"error": f"Internal server error: {exc}"}, status_code=500)

    @app.on_event("startup")
    async def startup():
        """Log the effective configuration."""
        logger.info(
            "Server is running",
            host=config.host,
            port=config.port,
            work_root=str(config.work_root),
        )

    @app.on_event("shutdown")
    async def shutdown():
        """Remove any working copies left behind."""
        logger.info("Shutting down")
        try:
            purge_work_root(config.work_root)
        except CleanupError as e:
            logger.error("Shutdown cleanup failed", error=str(e))
            app.state.shutdown_clean = False
            return
        logger.info("Shutdown cleanup completed")

    return app
