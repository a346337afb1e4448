"""Request and response schemas for the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel


class ProcessRepoRequest(BaseModel):
    """Body of POST /process-repo.

    A missing url is accepted here and rejected by the pipeline, so the
    caller gets the standard error payload instead of a schema error.
    """

    url: str | None = None

    model_config = {"extra": "ignore"}


class ProcessRepoResponse(BaseModel):
    """Body returned by POST /process-repo.

    Exactly one of content or error is set.
    """

    content: str | None = None
    error: str | None = None
