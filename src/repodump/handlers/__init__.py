"""Route handlers for the service."""

from repodump.handlers.api import router as api_router

__all__ = ["api_router"]
