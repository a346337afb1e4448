"""API route handlers for repository processing."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Request

from repodump.models import ProcessRepoRequest, ProcessRepoResponse

router = APIRouter(tags=["api"])

logger = structlog.get_logger()


@router.post(
    "/process-repo",
    response_model=ProcessRepoResponse,
    response_model_exclude_none=True,
)
async def process_repo(request: Request, payload: ProcessRepoRequest):
    """Clone a repository and return its source files as one text blob.

    Logical failures are reported in the error field with status 200.

    Returns:
        ProcessRepoResponse with content or error.
    """
    pipeline = request.app.state.pipeline
    logger.info("Received request to process repository")

    result = await pipeline.run(payload.url)
    if result.ok:
        return ProcessRepoResponse(content=result.content)
    return ProcessRepoResponse(error=result.error)


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}
